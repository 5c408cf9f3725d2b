"""
Formatting instructions for coach responses.

These blocks are appended to every coach prompt so responses render well
as markdown in the chat view:
- Number emojis for distinct points
- Bullets for sub-details
- Bold for keywords and emotional shifts
"""

# Conversational turns
CHAT_FORMATTING = """
FORMATTING REQUIREMENTS:
- **Structure is key.** Use clear paragraphs.
- **Use Number Emojis (1️⃣, 2️⃣, 3️⃣)** when listing distinct points or insights.
- **Use Bullet Points (•)** for sub-details to make it easy to scan.
- **Use Bold Text** to highlight key keywords or emotional shifts.
- Avoid long walls of text.
"""

# Topic summaries and the holistic report
INSIGHT_FORMATTING = """
FORMATTING REQUIREMENTS:
- Use **Number Emojis (1️⃣, 2️⃣, 3️⃣)** to clearly separate the main points.
- Use **Bullet Points** for details.
- Use **Bold** for emphasis.
- Make it look like a professional, structured insight report with clear spacing.
"""

REPLY_LANGUAGE = "Reply in Chinese (Simplified)."
