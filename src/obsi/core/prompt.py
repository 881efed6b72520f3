"""System prompts for the AI-powered commands."""

import logging
from pathlib import Path

from obsi.core.config import PROMPTS_DIR
from obsi.vault.layout import INBOX_FOLDER, PARA_FOLDERS

logger = logging.getLogger(__name__)

_DESTINATIONS = "\n".join(
    f"   - {folder}/ - {purpose}" for folder, purpose in PARA_FOLDERS.items()
)

REVIEW_PROMPT = f"""You are an inbox processing assistant. Help organize notes in the user's Obsidian vault at {{vault}}.

Instructions:
1. List files in {{vault}}/{INBOX_FOLDER}/ using ls or find
2. Read each note's content using cat
3. For each note, suggest where it should be filed:
{_DESTINATIONS}

4. Present as a checklist with suggestions
5. If user confirms, use "obs move <from> <to>" to move notes

Ask: "Should I move these notes to the suggested locations?\""""

LINK_PROMPT = """You are a note linking assistant. Find related notes in the user's Obsidian vault at {vault}.

Instructions:
1. Use grep or find to search for related notes
2. Read note content using cat
3. Suggest [[wikilinks]] to add based on:
   - Similar tags
   - Similar titles
   - Mentioned concepts

Output format:
## Related Notes for "Topic"

**Strong connections:**
- [[Note Name]] - why it's related

**Suggested links to add:**
- Link to [[Related Concept]] when discussing X"""

SUMMARIZE_PROMPT = """You are a note summarization assistant for the vault at {vault}.

Instructions:
1. Read the note content using cat
2. Create a concise summary with:
   - Key points (bullet list)
   - Main themes
   - Action items (if any)
   - Related concepts

Output format:
## Summary: Note Title

**Key Points:**
- Point 1
- Point 2

**Themes:** theme1, theme2

**Action Items:**
- [ ] Any todos found"""

AMEND_PROMPT = """You are a daily note assistant. The user's daily note is at: {note}

Read the note, make the requested changes, and confirm what you did. Be concise."""

PROMPTS = {
    "review": REVIEW_PROMPT,
    "link": LINK_PROMPT,
    "summarize": SUMMARIZE_PROMPT,
}


def load_prompt_override(name: str, prompts_dir: str | None = None) -> str | None:
    """
    Load a prompt template from the overrides directory.

    Args:
        name: Prompt name (review, link, summarize)
        prompts_dir: Directory holding <name>.md (defaults to $OBSI_PROMPTS_DIR)

    Returns:
        Template text, or None when there is no usable override
    """
    directory = prompts_dir if prompts_dir is not None else PROMPTS_DIR
    if not directory:
        return None

    path = Path(directory).expanduser() / f"{name}.md"
    try:
        if path.is_file():
            logger.debug(f"Using prompt override {path}")
            return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not read prompt override {path}: {e}")
    return None


def get_prompt(name: str, vault_path: Path, prompts_dir: str | None = None) -> str:
    """
    Build the system prompt for an AI command.

    Raises:
        KeyError: If the prompt name is unknown
    """
    template = load_prompt_override(name, prompts_dir) or PROMPTS[name]
    # Overrides are user-written; only the {vault} placeholder is substituted.
    return template.replace("{vault}", str(vault_path))


def get_amend_prompt(note_path: Path) -> str:
    """System prompt for amending a daily note."""
    return AMEND_PROMPT.replace("{note}", str(note_path))
