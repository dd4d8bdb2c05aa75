# football_proxy/summary.py
from typing import Any, Dict


def _items(payload: Any) -> list:
    if not isinstance(payload, dict):
        return []
    resp = payload.get("response")
    return resp if isinstance(resp, list) else []


def _as_int(value: Any) -> int:
    # "2" -> 2; None, "", listas, etc. -> 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def count_goals(payload: Any, endpoint: str) -> int:
    """
    Golos numa resposta API-Football:
      - endpoints de eventos: nº de itens com type == "Goal"
      - fixtures: soma de goals.home + goals.away (null conta 0)
    """
    items = _items(payload)
    if "events" in endpoint:
        return sum(1 for it in items if isinstance(it, dict) and it.get("type") == "Goal")

    total = 0
    for it in items:
        goals = it.get("goals") if isinstance(it, dict) else None
        if not isinstance(goals, dict):
            continue
        total += _as_int(goals.get("home")) + _as_int(goals.get("away"))
    return total


def summarize(payload: Any, endpoint: str) -> Dict[str, Any]:
    results = _as_int(payload.get("results")) if isinstance(payload, dict) else 0
    return {
        "results": results,
        "goals": count_goals(payload, endpoint),
        "hasData": results > 0,
    }
