# backend/app/client/render.py

from typing import Any, Dict, List


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _coords(activity: Dict[str, Any]) -> str:
    lat, lng = activity.get("lat"), activity.get("lng")
    if isinstance(lat, (int, float)) and isinstance(lng, (int, float)):
        return f" [{lat:.4f}, {lng:.4f}]"
    return ""


def _money(amount: Any, currency: str) -> str:
    if isinstance(amount, (int, float)):
        return f"{amount:,.0f} {currency}".strip()
    return _text(amount, "?")


def render_itinerary(itinerary: Dict[str, Any]) -> str:
    """
    Plain-text view of an itinerary.

    Days are shown in the order received, labelled with their dayNumber
    (or their position when it is missing), so repeated or shuffled numbers
    render as-is.
    """
    lines: List[str] = []
    lines.append(_text(itinerary.get("tripTitle"), "Untitled trip").upper())
    if itinerary.get("destination"):
        lines.append(f"Destination: {itinerary['destination']}")

    days = itinerary.get("days")
    for position, day in enumerate(days if isinstance(days, list) else []):
        if not isinstance(day, dict):
            continue
        number = day.get("dayNumber", position + 1)
        lines.append("")
        header = f"Day {_text(number, str(position + 1))}"
        theme = _text(day.get("theme"))
        lines.append(f"{header}: {theme}" if theme else header)

        activities = day.get("activities")
        for activity in activities if isinstance(activities, list) else []:
            if not isinstance(activity, dict):
                continue
            lines.append(
                f"  {_text(activity.get('time'), '--:--'):>5}  "
                f"{_text(activity.get('activity'))} @ {_text(activity.get('location'))}"
                f"{_coords(activity)}"
            )

    tips = itinerary.get("tips")
    if isinstance(tips, list) and tips:
        lines.append("")
        lines.append("Tips:")
        lines.extend(f"  - {_text(tip)}" for tip in tips)

    features = itinerary.get("smart_features")
    if isinstance(features, dict):
        budget = features.get("budget_estimator")
        if isinstance(budget, dict):
            currency = _text(budget.get("currency"))
            lines.append("")
            lines.append(f"Budget: {_money(budget.get('total_estimated'), currency)}")
            breakdown = budget.get("breakdown")
            if isinstance(breakdown, dict):
                for item, amount in breakdown.items():
                    lines.append(f"  {item}: {_money(amount, currency)}")

        packing = features.get("packing_list")
        if isinstance(packing, dict):
            lines.append("")
            lines.append(f"Weather: {_text(packing.get('weather_forecast'), 'unknown')}")
            essentials = packing.get("essentials")
            if isinstance(essentials, list) and essentials:
                lines.append("Pack: " + ", ".join(_text(e) for e in essentials))

        vibe = features.get("local_vibe")
        if isinstance(vibe, dict):
            phrases = vibe.get("survival_phrases")
            if isinstance(phrases, list) and phrases:
                lines.append("")
                lines.append("Phrases:")
                for phrase in phrases:
                    if isinstance(phrase, dict):
                        lines.append(
                            f"  {_text(phrase.get('original'))} ({_text(phrase.get('pronunciation'))})"
                            f" = {_text(phrase.get('meaning'))}"
                        )

    return "\n".join(lines)
