"""Instance health tracking for scan connection attempts."""

from column_inventory.types import ConnectionAttempt, InstanceHealth

DEFAULT_INSTANCE = "DEFAULT"


def full_instance_name(server: str, instance: str) -> str:
    """Return the connectable instance name.

    The default instance is addressed by the bare server name; named
    instances use ``server\\instance``.
    """
    if instance.upper() == DEFAULT_INSTANCE:
        return server
    return f"{server}\\{instance}"


def apply_connection_attempt(
    current: InstanceHealth | None, attempt: ConnectionAttempt
) -> InstanceHealth:
    """Fold a connection attempt into an instance's health record.

    Args:
        current: Existing health record, or None on first sight of the instance
        attempt: The attempt to record

    Returns:
        The updated health record. A success resets the failure counter and
        stamps the last successful connection; a failure increments the counter.

    """
    if current is None:
        current = InstanceHealth(
            server=attempt.server,
            instance=attempt.instance,
            full_instance_name=full_instance_name(attempt.server, attempt.instance),
            discovered_at=attempt.attempted_at,
        )

    update: dict[str, object] = {
        "last_attempt_at": attempt.attempted_at,
        "last_error": attempt.error_message,
        "databases_found": attempt.databases_found,
        "columns_inventoried": attempt.columns_inventoried,
    }
    if attempt.success:
        update["consecutive_failures"] = 0
        update["last_successful_connection"] = attempt.attempted_at
    else:
        update["consecutive_failures"] = current.consecutive_failures + 1

    return current.model_copy(update=update)
