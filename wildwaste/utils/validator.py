"""Input validation: checks user-entered values before any state change or request."""


def validate_credentials(username: str, password: str, confirm_password: str | None = None) -> None:
    """Validate login or registration input.

    Raises ValueError if either field is blank, or if a confirmation is
    given and does not match the password.
    """
    if not isinstance(username, str) or not username.strip():
        raise ValueError("Username must be a non-empty string.")
    if not isinstance(password, str) or not password.strip():
        raise ValueError("Password must be a non-empty string.")
    if confirm_password is not None and confirm_password != password:
        raise ValueError("Passwords do not match.")


def validate_draft(draft) -> None:
    """Validate a ReportDraft before submission.

    Trash type and quantity are required; coordinates must be valid WGS84.
    """
    if not draft.trash_type or not draft.trash_type.strip():
        raise ValueError("Trash type must be a non-empty string.")
    if not draft.quantity or not draft.quantity.strip():
        raise ValueError("Quantity must be a non-empty string.")
    if not -90.0 <= draft.latitude <= 90.0:
        raise ValueError(f"Latitude {draft.latitude} is out of range.")
    if not -180.0 <= draft.longitude <= 180.0:
        raise ValueError(f"Longitude {draft.longitude} is out of range.")
