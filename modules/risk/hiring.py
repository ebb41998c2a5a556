from typing import Any, Dict, List

PRIORITY_RANK = {"Critical": 0, "High": 1, "Medium": 2, "Low": 3}


def rank_open_positions(
    positions: List[Dict[str, Any]],
    department_risk: Dict[str, float],
) -> List[Dict[str, Any]]:
    """
    Order open positions for hiring.

    Declared priority first, then the department's average attrition risk
    (riskier departments first), then oldest posting first. Each returned
    row carries the "department_risk" it was ranked with.
    """
    ranked = []
    for position in positions:
        row = dict(position)
        row["department_risk"] = round(department_risk.get(position.get("department"), 0.0), 4)
        ranked.append(row)

    ranked.sort(
        key=lambda p: (
            PRIORITY_RANK.get(p.get("priority"), len(PRIORITY_RANK)),
            -p["department_risk"],
            str(p.get("posted_date") or ""),
        )
    )
    return ranked
