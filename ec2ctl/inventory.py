from __future__ import annotations

import logging
import sys
from typing import Any

from rich.text import Text

from ec2ctl.constants import EXIT_ERROR
from ec2ctl.extract import extract_address, extract_instance
from ec2ctl.filters import compile_filter, filter_records
from ec2ctl.models import FilterSpec
from ec2ctl.providers.exceptions import ProviderCredentialsError, ProviderError
from ec2ctl.render import (
    ADDRESS_QUIET_FIELDS,
    INSTANCE_QUIET_FIELDS,
    AddressReport,
    InstanceReport,
    err_console,
    validate_quiet_field,
)

logger = logging.getLogger(__name__)


class InventoryManager:
    """Implements the read-only listing commands (list, ips).

    Parameters
    ----------
    compute_provider_factory : Any
        Factory function to create compute provider instances for a region
    region : str
        Effective region for this invocation
    """

    def __init__(self, compute_provider_factory: Any, region: str) -> None:
        self.compute_provider_factory = compute_provider_factory
        self.region = region

    def _report_remote_failure(self, error: ProviderError, action: str) -> None:
        """Print a remote failure and exit with status 1."""
        logger.debug("%s failed in %s", action, self.region, exc_info=error)
        err_console.print(str(error), markup=False)
        err_console.print(
            Text.assemble(
                (f"Error {action} in ", "red"),
                (self.region, "green"),
                (": details above", "red"),
            )
        )
        sys.exit(EXIT_ERROR)

    def list(
        self,
        filter_spec: FilterSpec,
        json_output: bool = False,
        quiet: bool = False,
        extended: bool = False,
        quiet_field: str = "name",
    ) -> None:
        """List instances in the region that match ``filter_spec``.

        Parameters
        ----------
        filter_spec : FilterSpec
            Match criteria
        json_output : bool
            Print the matching records as one JSON document
        quiet : bool
            Print only ``quiet_field`` per record and no summary
        extended : bool
            Include addresses and image id in plain output
        quiet_field : str
            Field printed in quiet mode (name, id, public_ip, private_ip)

        Raises
        ------
        InvalidFilterError
            If a criterion is not a valid regular expression; raised before
            any remote call
        ValueError
            If ``quiet_field`` is not recognized
        ProviderCredentialsError
            If AWS credentials are not configured
        SystemExit
            Exits with code 1 if the remote listing fails
        """
        predicate = compile_filter(filter_spec)
        validate_quiet_field(quiet_field, INSTANCE_QUIET_FIELDS)

        compute_provider = self.compute_provider_factory(region=self.region)

        try:
            raw_instances = compute_provider.describe_instances()
        except ProviderCredentialsError:
            raise
        except ProviderError as e:
            self._report_remote_failure(e, "finding instances")
            return

        records = [extract_instance(raw) for raw in raw_instances]
        matches = filter_records(records, filter_spec, predicate=predicate)

        logger.debug(
            "%d of %d instances matched in %s", len(matches), len(records), self.region
        )

        report = InstanceReport(
            json_output=json_output,
            quiet=quiet,
            extended=extended,
            quiet_field=quiet_field,
        )
        report.emit(matches, self.region)

    def ips(
        self,
        json_output: bool = False,
        quiet: bool = False,
        quiet_field: str = "public_ip",
    ) -> None:
        """List elastic IPs in the region.

        Parameters
        ----------
        json_output : bool
            Print the raw address entries as one JSON document
        quiet : bool
            Print only ``quiet_field`` per address and no summary
        quiet_field : str
            Field printed in quiet mode (public_ip, private_ip, name)

        Raises
        ------
        ProviderCredentialsError
            If AWS credentials are not configured
        SystemExit
            Exits with code 1 if the remote call fails
        """
        validate_quiet_field(quiet_field, ADDRESS_QUIET_FIELDS)

        compute_provider = self.compute_provider_factory(region=self.region)

        try:
            raw_addresses = compute_provider.describe_addresses()
        except ProviderCredentialsError:
            raise
        except ProviderError as e:
            self._report_remote_failure(e, "listing elastic IPs")
            return

        records = [extract_address(raw) for raw in raw_addresses]

        report = AddressReport(
            json_output=json_output,
            quiet=quiet,
            quiet_field=quiet_field,
            raw=raw_addresses,
        )
        report.emit(records, self.region)
