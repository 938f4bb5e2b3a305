from ulid import ULID


def new_ulid(prefix: str | None = None) -> str:
    value = str(ULID()).lower()
    return f"{prefix}{value}" if prefix else value


def new_event_id() -> str:
    return new_ulid("ev_")


def new_room_id() -> str:
    return new_ulid("ro_")


def new_participant_identity(user_type: str) -> str:
    return new_ulid(f"{user_type}-")
