"""Built-in templates registered by default.

These strings are part of the public contract with existing callers and must
not be edited.
"""

from typing import Dict

from .engine import PromptEngine, Template

# Prefix used by BuildPromptStep when no template is involved
QA_PREFIX = "请回答以下问题：\n\n"

DEFAULT_TEMPLATES: Dict[str, Template] = {
    "qa": Template(
        name="qa",
        content="请回答以下问题：\n\n{{.question}}\n\n请提供详细、准确的答案。",
        version="1.0",
        metadata={"type": "question-answer"},
    ),
    "translation": Template(
        name="translation",
        content="请将以下文本翻译成{{.target_language}}：\n\n{{.text}}\n\n请保持原文的意思和风格。",
        version="1.0",
        metadata={"type": "translation"},
    ),
    "summary": Template(
        name="summary",
        content="请总结以下文本的主要内容：\n\n{{.text}}\n\n请提供简洁、准确的总结。",
        version="1.0",
        metadata={"type": "summarization"},
    ),
    "code_review": Template(
        name="code_review",
        content="请对以下代码进行审查：\n\n```{{.language}}\n{{.code}}\n```\n\n请从代码质量、安全性、性能等方面进行评估，并提供改进建议。",
        version="1.0",
        metadata={"type": "code-review"},
    ),
}


def register_defaults(engine: PromptEngine) -> PromptEngine:
    """Add the built-in templates to an engine (overwrites same-named entries)."""
    for template in DEFAULT_TEMPLATES.values():
        engine.add_template(template)
    return engine


def default_prompt_engine() -> PromptEngine:
    """New PromptEngine with the four built-in templates registered."""
    return register_defaults(PromptEngine())
