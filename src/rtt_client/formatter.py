from __future__ import annotations

from typing import Sequence

from .models import LocationDetail, Lineup, Pair, Service


def format_lineup(lineup: Lineup) -> str:
    """Render a text summary of a lineup for the terminal."""

    header = _format_header(lineup)
    if not lineup.services:
        return f"{header}\nNo matching services found."

    lines = [header]
    for idx, service in enumerate(lineup.services, start=1):
        origin = service.origin or service.location_detail.origin
        destination = service.destination or service.location_detail.destination
        lines.append(
            "\n".join(
                [
                    f"{idx}. {_describe_pairs(origin)} ➜ {_describe_pairs(destination)}",
                    _format_timing(service.location_detail, service.planned_cancel),
                    _format_platform(service.location_detail),
                    f"Operator: {service.atoc_name or service.atoc_code or 'Unknown'}",
                    f"Service: {service.service_uid} ({service.run_date})",
                ]
            )
        )

    return "\n\n".join(lines)


def format_service(service: Service) -> str:
    """Render a service and its calling points for the terminal."""

    title = (
        f"{service.train_identity or service.service_uid} "
        f"{_describe_pairs(service.origin)} ➜ {_describe_pairs(service.destination)}"
    )
    lines = [
        title,
        f"Run date: {service.run_date}",
        f"Operator: {service.atoc_name or service.atoc_code or 'Unknown'}",
    ]
    if service.planned_cancel:
        lines.append("Planned cancellation")
    if not service.locations:
        lines.append("Calling points data unavailable.")
        return "\n".join(lines)

    for location in service.locations:
        lines.append(_format_calling_point(location))
    return "\n".join(lines)


def _format_header(lineup: Lineup) -> str:
    origin = lineup.location.name or lineup.location.crs or "Unknown"
    destination = lineup.filter.destination
    if destination.name or destination.crs:
        return f"Services from {origin} to {destination.name or destination.crs}"
    return f"Services at {origin}"


def _format_timing(detail: LocationDetail, planned_cancel: bool) -> str:
    aimed = detail.gbtt_booked_departure or detail.gbtt_booked_arrival or "----"
    expected = detail.realtime_departure or detail.realtime_arrival
    if planned_cancel or detail.cancel_reason_code:
        reason = detail.cancel_reason_short_text or "cancelled"
        return f"Due {aimed} (CANCELLED: {reason})"
    if expected and expected != aimed:
        return f"Due {aimed} (exp. {expected})"
    return f"Due {aimed}"


def _format_platform(detail: LocationDetail) -> str:
    if not detail.platform:
        return "Platform TBC"
    suffix = " (changed)" if detail.platform_changed else ""
    return f"Platform {detail.platform}{suffix}"


def _format_calling_point(location: LocationDetail) -> str:
    arrival = location.realtime_arrival or location.gbtt_booked_arrival or "    "
    departure = location.realtime_departure or location.gbtt_booked_departure or "    "
    name = location.description or location.crs or location.tiploc
    platform = f" plat {location.platform}" if location.platform else ""
    return f"  {arrival} {departure}  {name}{platform}"


def _describe_pairs(pairs: Sequence[Pair]) -> str:
    if not pairs:
        return "Unknown"
    return " & ".join(pair.description or pair.tiploc for pair in pairs)

