"""
Scrollable markdown view of one response.
"""

from textual.app import App, ComposeResult
from textual.widgets import Footer, MarkdownViewer


class MarkdownPagerApp(App):
    """Full-screen markdown viewer; any of the quit keys returns to the chat."""
    CSS = """
MarkdownViewer {
    max-width: 120;            /* keep the text column readable */
    padding: 0 2;
}
    """
    BINDINGS = [
        ('q', 'quit', 'quit'),
        ('escape', 'quit', 'quit'),
    ]

    def __init__(self, markdown: str) -> None:
        """
        Initialize the pager.

        Args:
            markdown (str): The document to display
        """
        super().__init__()
        self.markdown = markdown

    def compose(self) -> ComposeResult:
        yield MarkdownViewer(self.markdown, show_table_of_contents=False)
        yield Footer()

    async def on_mount(self) -> None:
        """Focus the viewer so arrows and PageUp/PageDown scroll it."""
        self.query_one(MarkdownViewer).focus()
