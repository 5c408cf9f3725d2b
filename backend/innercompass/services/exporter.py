"""Plain-text export of a user's full progress.

Layout, repeated per module in catalog order:

    module header
      topic header + main prompt
      message log (chronological, labeled by speaker)
      user summary
      AI summary
      separator

Topics the user never opened are skipped. No network calls.
"""

from datetime import date

from innercompass.content.catalog import Catalog
from innercompass.models.conversation import Message, UserRecord
from innercompass.utils.text import slugify

SPEAKER_LABELS = {
    "user": "我",
    "assistant": "AI 教练",
    "system": "系统",
}

MODULE_RULE = "=" * 40
TOPIC_RULE = "-" * 40


def export_filename(display_name: str, export_date: date) -> str:
    return f"InnerCompass_{slugify(display_name)}_{export_date.isoformat()}.txt"


def _format_message(message: Message) -> str:
    speaker = SPEAKER_LABELS.get(message.role, message.role)
    stamp = message.created_at.strftime("%Y-%m-%d %H:%M")
    return f"[{stamp}] {speaker}：\n{message.content}"


def export_progress(
    record: UserRecord, catalog: Catalog, export_date: date
) -> tuple[str, str]:
    """Return ``(filename, text)`` for the user's progress."""
    lines = [
        "InnerCompass AI 自我探索记录",
        f"用户：{record.display_name}",
        f"导出日期：{export_date.isoformat()}",
        MODULE_RULE,
        "",
    ]

    for module in catalog.modules:
        lines.append(f"【{module.title}】{module.icon}")
        lines.append(module.description)
        lines.append("")

        exported_any = False
        for topic in module.topics:
            progress = record.progress.get(module.key_for(topic))
            if progress is None or not progress.messages:
                continue
            exported_any = True

            status = "已完成" if progress.is_completed else "进行中"
            lines.append(f"## {topic.title}（{status}）")
            lines.append(f"核心议题：{topic.main_prompt}")
            lines.append("")
            lines.append("对话记录：")
            for message in progress.messages:
                lines.append(_format_message(message))
                lines.append("")

            lines.append("我的总结：")
            lines.append(progress.user_summary or "（暂无）")
            lines.append("")
            lines.append("AI 教练洞察：")
            lines.append(progress.ai_summary or "（暂无）")
            lines.append(TOPIC_RULE)
            lines.append("")

        if not exported_any:
            lines.append("（尚未开始）")
            lines.append("")
        lines.append(MODULE_RULE)
        lines.append("")

    return export_filename(record.display_name, export_date), "\n".join(lines)
