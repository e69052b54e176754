"""Formatting of system info and virtual media for display."""

import json
from typing import List

from .models import SystemInfo, VirtualMediaSlot


def format_system_info(info: SystemInfo, format: str = "text") -> str:
    """
    Format system status for display.

    Args:
        info: System status from the BMC
        format: Output format ('text' or 'json')

    Returns:
        Formatted string output
    """
    if format.lower() == "json":
        return json.dumps(info.to_dict(), indent=2)

    return "\n".join([
        f"Power State: {info.power_state}",
        f"Health: {info.health}",
        f"State: {info.state}",
    ])


def format_virtual_media(slots: List[VirtualMediaSlot], format: str = "text") -> str:
    """Format virtual media slots as a table or JSON list."""
    if format.lower() == "json":
        return json.dumps([slot.to_dict() for slot in slots], indent=2)

    if not slots:
        return "No virtual media slots found"

    row = "{:<15} {:<15} {:<10} {:<10} {}"
    lines = [
        row.format("Name", "Media Types", "Connected", "Inserted", "Image"),
        "-" * 81,
    ]
    for slot in slots:
        lines.append(row.format(
            slot.name,
            ", ".join(slot.media_types) or "None",
            "Yes" if slot.connected else "No",
            "Yes" if slot.inserted else "No",
            slot.image or "-",
        ))
    return "\n".join(lines)
