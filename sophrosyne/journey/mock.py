"""
Sample journey used when live generation is unavailable.

What it does:
- Builds a 7-day journey in the flat days layout
- Interpolates the user's goal and maturity into the devotionals
Main purpose:
Keep onboarding working without an API key or when the upstream fails.
"""


from sophrosyne.core.logging import get_logger
from sophrosyne.llm.errors import JourneyClientError

log = get_logger("journey.mock")


def _day(title: str, verse: str, context: str, meaning: str, qa_prompt: str) -> dict:
    return {
        "title": title,
        "verse": verse,
        "devotional": {"context": context, "meaning": meaning, "qaPrompt": qa_prompt},
    }


def generate_mock_journey(goal: str, maturity_level: str) -> dict:
    return {
        "path": {
            "days": [
                _day(
                    "Day 1: Beginning with Hope",
                    "Jeremiah 29:11 (ESV) - For I know the plans I have for you, declares the Lord, "
                    "plans for welfare and not for evil, to give you a future and a hope.",
                    "Jeremiah spoke these words to the Israelites in Babylonian exile, reminding them "
                    "that God had not forgotten them despite their circumstances.",
                    f"Even in the midst of struggle with {goal}, God's plans for you are good. This verse "
                    "reassures us that our current difficulties are not the end of our story.",
                    f"How can you trust God's good plans for you even when facing {goal}?",
                ),
                _day(
                    "Day 2: Casting Your Cares",
                    "1 Peter 5:7 (ESV) - Casting all your anxieties on him, because he cares for you.",
                    "Peter wrote to believers facing persecution, encouraging them to humble themselves "
                    "and trust God's care.",
                    f"God invites you to actively cast your burdens, including {goal}, onto Him. This isn't "
                    "passive; it's a deliberate choice to trust His care.",
                    f"What specific anxieties related to {goal} can you cast on God today?",
                ),
                _day(
                    "Day 3: Trusting Beyond Understanding",
                    "Proverbs 3:5-6 (ESV) - Trust in the Lord with all your heart, and do not lean on your "
                    "own understanding. In all your ways acknowledge him, and he will make straight your paths.",
                    "This wisdom from Solomon emphasizes complete reliance on God rather than our limited "
                    "human perspective.",
                    f"When facing {goal}, your own understanding may feel insufficient. God calls you to "
                    "trust Him fully, and He promises to guide your path.",
                    f"Where are you leaning on your own understanding instead of trusting God with {goal}?",
                ),
                _day(
                    "Day 4: Finding Rest",
                    "Matthew 11:28-30 (ESV) - Come to me, all who labor and are heavy laden, and I will give "
                    "you rest. Take my yoke upon you, and learn from me, for I am gentle and lowly in heart, "
                    "and you will find rest for your souls.",
                    "Jesus spoke these words to crowds burdened by religious legalism and life's hardships.",
                    f"Your struggle with {goal} is heavy, but Jesus offers genuine rest: not just physical, "
                    "but soul-deep peace.",
                    f"How can you practically 'come to Jesus' for rest from {goal} today?",
                ),
                _day(
                    "Day 5: Renewed Strength",
                    "Isaiah 40:31 (ESV) - But they who wait for the Lord shall renew their strength; they "
                    "shall mount up with wings like eagles; they shall run and not be weary; they shall walk "
                    "and not faint.",
                    "Isaiah prophesied comfort to exiles, reminding them of God's power to restore and "
                    "strengthen.",
                    f"Waiting on the Lord isn't passive; it's active trust. As you persevere through {goal}, "
                    "God promises renewed strength.",
                    f"What does 'waiting on the Lord' look like for you in the midst of {goal}?",
                ),
                _day(
                    "Day 6: God's Presence",
                    "Psalm 46:1 (ESV) - God is our refuge and strength, a very present help in trouble.",
                    "This psalm celebrates God as a secure fortress amid chaos and fear.",
                    f"God is not distant. He is 'very present', actively helping you navigate {goal} right now.",
                    f"How have you experienced God's presence as a refuge during {goal}?",
                ),
                _day(
                    "Day 7: Moving Forward in Faith",
                    "Philippians 4:13 (ESV) - I can do all things through him who strengthens me.",
                    "Paul wrote this from prison, testifying to Christ's sufficiency in every circumstance.",
                    f"Your journey with {maturity_level} faith and overcoming {goal} is possible: not in "
                    "your own strength, but through Christ who empowers you.",
                    f"What specific step can you take today, trusting Christ's strength to help you with {goal}?",
                ),
            ]
        }
    }


async def generate_journey_or_mock(client, goal: str, maturity_level: str, provider: str = "grok") -> tuple[dict, bool]:
    """Returns (content, used_fallback)."""
    if (provider or "").lower().strip() == "mock":
        return generate_mock_journey(goal, maturity_level), True
    try:
        journey = await client.generate_journey(goal, maturity_level)
        return journey, False
    except JourneyClientError as e:
        log.warning(f"Journey generation failed ({type(e).__name__}: {e}). Falling back to sample journey")
        return generate_mock_journey(goal, maturity_level), True
