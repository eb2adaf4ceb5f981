"""Update-type color maps."""

from pkgver.models import UpdateType

UPDATE_COLORS: dict[UpdateType, str] = {
    UpdateType.MAJOR: "red bold",
    UpdateType.MINOR: "yellow",
    UpdateType.PATCH: "cyan",
    UpdateType.PRERELEASE: "blue",
    UpdateType.NONE: "green",
}


def styled_update(update_type: UpdateType, has_latest: bool = True) -> str:
    if not has_latest:
        return "[dim]unknown[/dim]"
    color = UPDATE_COLORS.get(update_type, "white")
    label = "up-to-date" if update_type == UpdateType.NONE else update_type.value
    return f"[{color}]{label}[/{color}]"
