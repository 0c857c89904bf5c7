from typing import Any, Mapping, Sequence


JOURNEY_TEMPLATE = """Generate a JSON Bible journey for struggle: {goal}, faithWord: {maturity}.

Verses from {translation} only.

IMPORTANT: Length should be 7-28 days based on severity:
- Acute struggles (Grief): 7-14 days
- Ongoing struggles (Anxiety, Burnout): 14-28 days

REQUIRED JSON FORMAT (do NOT use weeks structure):
{{
  "path": {{
    "days": [
      {{
        "title": "Day 1: Title here",
        "verse": "Full {translation} verse with reference",
        "devotional": {{
          "context": "Biblical background and setting",
          "meaning": "Deeper theological interpretation",
          "qaPrompt": "Thoughtful reflection question"
        }}
      }}
    ]
  }}
}}

Generate {length} days of content. Use ONLY the format above with a flat 'days' array directly under 'path'.
"""


REVISION_TEMPLATE = """Revise this devotional day based on user feedback.

Current Day:
Title: {title}
Verse: {verse}
{devotional}

User Feedback: {feedback}

Generate an improved version that addresses the feedback while maintaining biblical accuracy.
Return ONLY a single JSON object in this exact format:
{{
  "title": "Improved day title",
  "verse": "{translation} Bible verse with reference",
  "devotional": {{
    "context": "Biblical background and setting",
    "meaning": "Deeper theological interpretation",
    "qaPrompt": "Thoughtful reflection question"
  }}
}}
"""


REFLECTION_TEMPLATE = """You are a wise spiritual mentor helping someone deepen their faith through biblical reflection.

{context}

Current question: {question}

Provide a thoughtful, encouraging response that:
1. Builds on their previous reflections
2. Offers biblical wisdom and insight
3. Encourages deeper spiritual growth
4. Is personal and supportive

Keep response under 200 words and focus on spiritual encouragement.
"""


def _text(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def journey_length_hint(goal: str) -> str:
    return "7-10" if goal.strip().lower() == "grief" else "14-21"


def journey_prompt(goal: str, maturity: str, translation: str = "ESV") -> str:
    return JOURNEY_TEMPLATE.format(
        goal=goal,
        maturity=maturity,
        translation=translation,
        length=journey_length_hint(goal),
    )


def revision_prompt(current_day: Mapping[str, Any], feedback: str, translation: str = "ESV") -> str:
    devotional_info = ""
    devotional = current_day.get("devotional")
    if isinstance(devotional, Mapping):
        devotional_info = (
            f"Current Context: {_text(devotional.get('context'))}\n"
            f"Current Meaning: {_text(devotional.get('meaning'))}\n"
            f"Current Q&A Prompt: {_text(devotional.get('qaPrompt'))}"
        )
    return REVISION_TEMPLATE.format(
        title=_text(current_day.get("title"), "Untitled"),
        verse=_text(current_day.get("verse")),
        devotional=devotional_info,
        feedback=feedback,
        translation=translation,
    )


def reflection_context(prior_exchanges: Sequence[Mapping[str, Any]]) -> str:
    lines = ["Previous spiritual reflections:"]
    n = 0
    for qa in prior_exchanges:
        q, a = qa.get("question"), qa.get("answer")
        # numbering follows the position in the chain, skipped pairs included
        n += 1
        if not isinstance(q, str) or not isinstance(a, str):
            continue
        lines.append(f"Q{n}: {q}\nA{n}: {a}\n")
    return "\n".join(lines)


def reflection_prompt(prior_exchanges: Sequence[Mapping[str, Any]], question: str) -> str:
    return REFLECTION_TEMPLATE.format(context=reflection_context(prior_exchanges), question=question)
