from collections import Counter
from typing import Any, Dict, List

CONCERN_TYPES = {"improvement", "concern"}
EXCERPT_LIMIT = 3
EXCERPT_LENGTH = 120


def summarize_feedback(feedback: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Count feedback by type and keep a few recent excerpts.

    Rows may arrive in any order; excerpts are the newest first.
    """
    newest_first = sorted(feedback, key=lambda f: str(f.get("feedback_date") or ""), reverse=True)
    counts = Counter((f.get("feedback_type") or "General") for f in newest_first)
    concerns = sum(n for t, n in counts.items() if t.lower() in CONCERN_TYPES)

    excerpts = []
    for item in newest_first[:EXCERPT_LIMIT]:
        text = (item.get("text") or "").strip()
        if len(text) > EXCERPT_LENGTH:
            text = text[:EXCERPT_LENGTH].rstrip() + "..."
        excerpts.append(f"{item.get('feedback_type') or 'General'}: \"{text}\"")

    return {
        "total": len(newest_first),
        "by_type": dict(counts),
        "concerns": concerns,
        "excerpts": excerpts,
    }
