"""ec2ctl - inspect and await EC2 instances from the command line."""

__version__ = "0.1.0"
