"""Prompt templates for the translation provider.

The provider is a free-text instruction follower with no structural guarantee,
so list translation relies on a separator the model is asked to keep verbatim.
"""


def get_translation_prompt(text: str, source_lang: str, target_lang: str) -> str:
    """Build the prompt for translating a single text.

    Args:
        text: Text to translate.
        source_lang: Language code of the text (e.g. "es").
        target_lang: Language code to translate into (e.g. "en").

    Returns:
        str: Instruction asking for the bare translation only.
    """
    return (
        f"Translate ONLY the following text from {source_lang} to {target_lang}. "
        f"Do not add any extra characters or explanations. "
        f'The text to translate is: "{text}"'
    )


def get_batch_translation_prompt(
    joined_text: str,
    source_lang: str,
    target_lang: str,
    separator: str,
    context: str = "items",
) -> str:
    """Build the prompt for translating a separator-joined list.

    Args:
        joined_text: Items joined with `separator`.
        source_lang: Language code of the items.
        target_lang: Language code to translate into.
        separator: Token placed between items, which must survive translation.
        context: What the items are (e.g. "kitchen ingredients", "recipe titles").

    Returns:
        str: Instruction asking for the translated list with the separator kept.
    """
    return (
        f"Translate the following list of {context} from {source_lang} to {target_lang}. "
        f'Keep the exact same separator ("{separator}") between each item and keep the items in the same order. '
        f"Do not add any extra characters or explanations. "
        f'The list to translate is: "{joined_text}"'
    )
