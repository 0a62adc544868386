"""Interactive prompts shared by the collector and the build steps."""

import click


class Prompter:
    """Reads operator input; labels carry a demo-mode marker when applicable."""

    DEMO_SUFFIX = " (demo mode)"

    def __init__(self, demo_mode: bool = False, prompt_func=click.prompt):
        self.demo_mode = demo_mode
        self.prompt_func = prompt_func

    def label(self, text: str, demo_label: bool = True) -> str:
        return f"{text}{self.DEMO_SUFFIX}" if self.demo_mode and demo_label else text

    @staticmethod
    def _suffix(label: str) -> str:
        # Questions read "...set to? " while fields read "Domain name: ".
        return " " if label.endswith("?") else ": "

    def ask(self, text: str, demo_label: bool = True) -> str:
        label = self.label(text, demo_label)
        value = self.prompt_func(
            label,
            default="",
            show_default=False,
            prompt_suffix=self._suffix(label),
        )
        return str(value).strip()

    def ask_secret(self, text: str) -> str:
        label = self.label(text)
        return str(
            self.prompt_func(
                label,
                default="",
                show_default=False,
                hide_input=True,
                prompt_suffix=self._suffix(label),
            )
        )

    def confirm(self, text: str, default: bool = False, demo_label: bool = True) -> bool:
        """Only an explicit y/Y (or n/N when the default is yes) changes the answer."""
        answer = self.ask(text, demo_label)
        if default:
            return answer not in ("n", "N")
        return answer in ("y", "Y")
