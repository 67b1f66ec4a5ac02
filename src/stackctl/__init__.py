"""stackctl: command dispatcher for a docker compose stack (backend, gateway, MongoDB)."""
