"""End-to-end connect flow: discover, select, fetch credentials, hand off."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from typing import Any

from rdsconnect.cache import CacheStore, last_selection_key
from rdsconnect.credentials import resolve_credentials
from rdsconnect.handoff import (
    NativeRepl,
    TerminalController,
    find_client_binary,
    get_terminal_controller,
    run_external,
)
from rdsconnect.models import ConnectConfig
from rdsconnect.picker import FuzzyPicker, Picker
from rdsconnect.providers.aws import RDSDiscovery, SecretsFetcher
from rdsconnect.resolver import InstanceDiscovery, get_instances_with_cache, select_instance
from rdsconnect.vpn import warn_if_vpn_down

logger = logging.getLogger(__name__)


class ConnectRunner:
    """Run one connect invocation against a resolved configuration.

    Parameters
    ----------
    config : ConnectConfig
        Immutable run settings
    session : Any
        boto3 session bound to config.profile
    picker : Picker | None
        Interactive picker. If None, uses FuzzyPicker
    discovery : InstanceDiscovery | None
        Fleet lister. If None, uses RDSDiscovery in config.region
    credential_source : Any | None
        Secret fetcher. If None, uses SecretsFetcher
    terminal_controller : TerminalController | None
        Terminal ownership controller. If None, picks one for stdin
    which : Callable[[str], str | None]
        PATH lookup used to find client binaries
    native_repl_factory : Callable[..., Any]
        Factory for the fallback REPL
    """

    def __init__(
        self,
        config: ConnectConfig,
        session: Any,
        picker: Picker | None = None,
        discovery: InstanceDiscovery | None = None,
        credential_source: Any | None = None,
        terminal_controller: TerminalController | None = None,
        which: Callable[[str], str | None] = shutil.which,
        native_repl_factory: Callable[..., Any] = NativeRepl,
    ) -> None:
        self.config = config
        self.cache = CacheStore(config.cache_dir)
        self.picker = picker or FuzzyPicker()
        self.discovery = discovery or RDSDiscovery(session, config.region)
        self.credential_source = credential_source or SecretsFetcher(session)
        self.terminal_controller = terminal_controller
        self.which = which
        self.native_repl_factory = native_repl_factory

    def run(self, name: str | None = None, last: bool = False) -> int:
        """Connect to the instance chosen by name, last, or the picker.

        Returns
        -------
        int
            Exit status of the external client, 0 for the native REPL

        Raises
        ------
        ProviderError
            If the fleet cannot be listed
        NotFoundError
            If selection fails
        CredentialFetchError
            If credentials cannot be fetched
        ConnectionFailedError
            If the native fallback cannot connect
        """
        config = self.config

        if config.vpn_check:
            warn_if_vpn_down(config.profile, config.vpn_profiles)

        instances = get_instances_with_cache(self.cache, self.discovery, config)

        selected = select_instance(
            instances,
            name=name,
            last=last,
            profile=config.profile,
            cache=self.cache,
            picker=self.picker,
        )

        credentials = resolve_credentials(selected, config, self.credential_source)

        self.cache.save_last_selection(last_selection_key(config.profile), selected.id)
        logger.info(
            "Target: %s [%s]", selected.id, selected.host, extra={"stream": "stdout"}
        )

        binary = find_client_binary(config.clients, which=self.which)

        if binary is not None:
            controller = self.terminal_controller or get_terminal_controller()
            return run_external(binary, selected, credentials, config.database, controller)

        logger.warning("No binary clients found. Launching native fallback...")
        repl = self.native_repl_factory(selected, credentials, config.database)
        repl.run()
        return 0

    def complete(self, prefix: str = "") -> list[str]:
        """Return ``id<TAB>size`` completion candidates starting with prefix."""
        instances = get_instances_with_cache(self.cache, self.discovery, self.config)
        return [f"{i.id}\t{i.size}" for i in instances if i.id.startswith(prefix)]
