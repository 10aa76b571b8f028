from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape


def format_seconds(value: float) -> str:
    seconds = int(round(value or 0))
    if seconds >= 60:
        return f"{seconds // 60}分{seconds % 60:02d}秒"
    return f"{seconds}秒"


class FarmRenderer:
    def __init__(self, template_dir: Optional[Path] = None):
        # __file__ is .../harvest/farm/render.py -> parents[1] is the package root
        self.template_dir = Path(template_dir) if template_dir else \
            Path(__file__).resolve().parents[1] / "resources" / "farm"
        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self._env.filters['duration'] = format_seconds
        self._env.filters['percent'] = lambda v: f"{int((v or 0) * 100)}%"

    def render_template(self, template_name: str, **context) -> str:
        tpl = self._env.get_template(template_name)
        return tpl.render(**context)

    def render_status(self, engine, advice: Optional[str] = None) -> str:
        """渲染农场总览"""
        return self.render_template(
            'farm_status.html',
            farm=engine.status(),
            advice=advice if advice is not None else engine.advice(),
        )

    def list_templates(self):
        return list(self._env.list_templates())
