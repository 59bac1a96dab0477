"""
Prompt Builder - tutoring system prompt with learner memory
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape


class PromptBuilder:
    """
    Builds the AlgoSensei system prompt from a Jinja2 template.

    The template holds the tutoring policy (six ordered teaching stages,
    confirmation before moving on, progressive hints) and ends with a
    learner-context section filled from long-term memory.
    """

    def __init__(self, template_name: str = "tutor_system.jinja2"):
        templates_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=select_autoescape(['html', 'xml']),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )
        self.template_name = template_name

    def build_system_prompt(self, memories: Optional[List[Dict[str, Any]]] = None) -> str:
        """
        Render the system prompt.

        Args:
            memories: Memory dicts from MemoryService.fetch_context; blank
                entries are ignored

        Returns:
            System prompt text
        """
        contents = [
            m["content"].strip()
            for m in memories or []
            if isinstance(m.get("content"), str) and m["content"].strip()
        ]
        template = self.env.get_template(self.template_name)
        return template.render(memories=contents)
