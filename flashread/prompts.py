# flashread/prompts.py
from typing import Iterable, Optional

SUMMARIZER_SYSTEM = (
    "You are FlashRead, an expert summarizer. Produce concise, well-structured Markdown "
    "with headings and bullet points. Avoid fluff."
)

# sentence targets per length tier
SENTENCE_RANGES = {"short": "3-4", "medium": "6-8", "detailed": "10-12"}
RAPIDAPI_SENTENCES = {"short": 3, "medium": 5, "detailed": 8}

CHAT_GUIDELINES = """Guidelines:
- Be helpful, concise, and accurate
- Reference specific parts of the document when relevant
- If asked about something not in the document, clearly state that
- Use markdown formatting for better readability
- Keep responses focused and actionable
- If the user asks for explanations, break down complex concepts simply"""

ENHANCER_SYSTEM = """You are FlashRead AI, an expert content enhancer. Your task is to improve summaries by:

1. Making them more readable and well-structured
2. Adding better markdown formatting (headers, bullets, emphasis)
3. Improving clarity and flow
4. Ensuring key points are highlighted
5. Adding logical organization and sections
6. Maintaining the original meaning and key information

Guidelines:
- Use proper markdown formatting (##, **, -, etc.)
- Create clear sections with descriptive headers
- Use bullet points for lists and key points
- Emphasize important terms with **bold** or *italic*
- Keep the same level of detail but improve presentation
- Make it scannable and easy to read"""

CHAT_CONTEXT_CHARS = 4000
CHAT_HISTORY_TURNS = 6


def build_summary_prompt(mode: str, length: str, text: str, url: Optional[str] = None) -> str:
    sentences = SENTENCE_RANGES.get(length, SENTENCE_RANGES["medium"])
    source = f"Source URL: {url}\n" if mode == "url" and url else ""
    return "\n".join([
        f"Summarize the following content in {sentences} sentences.",
        "Output Markdown with:",
        "- A short title",
        "- Key bullets",
        "- A brief takeaway",
        "",
        source,
        "Content:",
        text,
    ])


def format_history(history: Iterable, max_turns: int = CHAT_HISTORY_TURNS) -> str:
    """Render the last `max_turns` messages as 'User: ...' / 'Assistant: ...' lines."""
    turns = list(history)[-max_turns:] if max_turns > 0 else []
    lines = []
    for msg in turns:
        role = msg.get("role") if isinstance(msg, dict) else getattr(msg, "role", "")
        content = msg.get("content", "") if isinstance(msg, dict) else getattr(msg, "content", "")
        lines.append(f"{'User' if role == 'user' else 'Assistant'}: {content}")
    return "\n".join(lines)


def build_chat_system_prompt(document_content: Optional[str], document_name: Optional[str], history: Iterable) -> str:
    if document_content:
        doc_block = (
            f'Document: "{document_name or "Untitled"}"\n'
            f"Content: {document_content[:CHAT_CONTEXT_CHARS]}..."
        )
    else:
        doc_block = "No document content available."
    return (
        "You are FlashRead AI, an intelligent assistant that helps users understand and explore "
        "documents and summaries.\n\n"
        f"You have access to the following document content:\n{doc_block}\n\n"
        f"Previous conversation:\n{format_history(history)}\n\n"
        f"{CHAT_GUIDELINES}"
    )


def build_enhance_prompt(content: str, document_name: Optional[str] = None) -> str:
    target = f' for "{document_name}"' if document_name else ""
    return (
        f"Please enhance this summary{target}:\n\n{content}\n\n"
        "Make it more readable, well-structured, and visually appealing while preserving all "
        "the key information."
    )
