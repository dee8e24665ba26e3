from docx.text.paragraph import Paragraph

from resudoc.utils.docx import get_paragraph_runs, remove_run, set_run_text


def merge_runs(paragraph: Paragraph, replacement: str) -> bool:
    """
    Writes `replacement` into the paragraph's first run and drops every other run.

    The first run keeps its formatting; formatting carried by later runs is
    lost. A paragraph without runs has nothing to anchor formatting on and is
    left untouched (returns False).
    """
    runs = get_paragraph_runs(paragraph)
    if not runs:
        return False

    set_run_text(runs[0], replacement)

    # Highest index first so earlier indices stay valid
    for i in range(len(runs) - 1, 0, -1):
        remove_run(paragraph, i)

    return True
