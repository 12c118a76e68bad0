"""Prompt text for file categorization."""

CATEGORIZATION_SYSTEM_PROMPT = (
    "You are a file categorization assistant. Given the name of a file or "
    "directory, reply with exactly one line in the format "
    "'Category : Subcategory'. Use short, general category names. Do not add "
    "explanations, punctuation, quotes or any other text."
)


def item_kind(is_directory: bool) -> str:
    return "directory" if is_directory else "file"


def build_categorization_prompt(
    name: str,
    path: str,
    kind: str,
    consistency_context: str = "",
) -> str:
    """Build the user prompt for a categorization request.

    Args:
        name: File or directory name
        path: Full path, or an empty string to omit it
        kind: "file" or "directory"
        consistency_context: Earlier categorizations to stay consistent with

    Returns:
        User prompt text
    """
    lines = [f"Categorize this {kind}.", f"Name: {name}"]
    if path:
        lines.append(f"Path: {path}")
    if consistency_context:
        lines.append("")
        lines.append("Stay consistent with these earlier categorizations:")
        lines.append(consistency_context)
    lines.append("")
    lines.append("Answer with 'Category : Subcategory' only.")
    return "\n".join(lines)
