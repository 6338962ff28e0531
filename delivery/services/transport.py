"""Transport selection: call a provider directly or go through the relay.

Browser-class sandboxes usually cannot reach third-party messaging APIs
cross-origin, while servers and native app shells can. The calling
environment is passed in as a RuntimeEnvironment value so the decision is a
pure function of its inputs.
"""

import sys

from pydantic import BaseModel, ConfigDict

from delivery.enums import Channel, RuntimeKind
from delivery.schemas import TransportDecision


class RuntimeEnvironment(BaseModel):
    """Description of the process the engine runs in.

    Attributes:
        name: Label used in logs.
        constrained_transport: Outbound calls are subject to cross-origin
            restrictions (browser sandbox, e.g. Pyodide).
        native_shell: Running inside a native app shell, which lifts those
            restrictions even when constrained_transport is set.
    """

    model_config = ConfigDict(frozen=True)

    name: str = RuntimeKind.SERVER.value
    constrained_transport: bool = False
    native_shell: bool = False

    @classmethod
    def for_kind(cls, kind: RuntimeKind | str) -> "RuntimeEnvironment":
        """Build the environment for a named runtime kind."""
        kind = RuntimeKind(kind)
        if kind is RuntimeKind.BROWSER:
            return cls(name=kind.value, constrained_transport=True)
        if kind is RuntimeKind.NATIVE:
            return cls(name=kind.value, constrained_transport=True, native_shell=True)
        return cls(name=kind.value)

    @classmethod
    def detect(
        cls, configured: str = "", platform: str | None = None
    ) -> "RuntimeEnvironment":
        """Resolve the runtime from configuration, else from the interpreter.

        Args:
            configured: Value of NOTIFICATION_RUNTIME; empty means detect.
            platform: Override for sys.platform.

        Returns:
            The runtime environment.
        """
        if configured:
            return cls.for_kind(configured.strip().lower())
        platform = platform if platform is not None else sys.platform
        if platform == "emscripten":
            return cls.for_kind(RuntimeKind.BROWSER)
        return cls.for_kind(RuntimeKind.SERVER)


def decide(
    channel: Channel | str,
    credentials_available: bool,
    environment: RuntimeEnvironment,
    explicit_override: bool | None = None,
) -> TransportDecision:
    """Choose between the direct provider call and the relay.

    Args:
        channel: Channel being sent on; reported in the reason.
        credentials_available: Whether the direct provider credential is set.
        environment: The calling environment.
        explicit_override: True forces the relay.

    Returns:
        TransportDecision with use_relay and a human readable reason.
    """
    channel = Channel(channel).value

    if explicit_override:
        return TransportDecision(
            use_relay=True, reason=f"{channel}: relay explicitly requested"
        )

    if environment.constrained_transport and not environment.native_shell:
        return TransportDecision(
            use_relay=True,
            reason=(
                f"{channel}: {environment.name} runtime "
                "cannot reach providers directly"
            ),
        )

    if not credentials_available:
        return TransportDecision(
            use_relay=True,
            reason=f"{channel}: direct provider credential not configured",
        )

    return TransportDecision(
        use_relay=False, reason=f"{channel}: direct provider call"
    )
