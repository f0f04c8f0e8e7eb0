# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
from __future__ import annotations

import os


MESSAGES = {
    "en": {
        "generated": "Translated file saved: {path}",
        "all_done": "All done!",
        "resuming": "Resuming from last saved progress...",
        "resume_missing": "No saved progress found at {path}; starting a fresh run.",
        "interrupt_notice": "Ctrl+C detected, saving progress...",
        "interrupted": "Progress saved to {path}. Run again with --resume to continue.",
        "interrupted_setup": "Interrupted before translation started; nothing was saved.",
        "invalid_version": "Invalid version ID: {version}",
        "lang_file_missing": "{target} not found in {path}",
        "lang_file_entries": "Lang file contains {count} entries.",
        "languages_loaded": "Loaded {count} languages for translation.",
        "no_languages": "Translator returned no languages; nothing to translate into.",
        "file_not_found": "File not found: {path}",
        "invalid_json": "Input is not valid JSON: {path} ({error})",
        "invalid_document": "Input cannot be translated: {error}",
        "missing_dependency": "Missing dependency: {missing}",
        "source_failed": "Could not prepare the source document: {error}",
        "checkpoint_failed": "Checkpoint error: {error}",
        "translate_failed": "Translation failed: {error}",
        "export_failed": "Writing output failed: {error}",
    },
    "zh": {
        "generated": "已保存翻译文件: {path}",
        "all_done": "全部完成！",
        "resuming": "正在从上次保存的进度恢复...",
        "resume_missing": "在 {path} 未找到保存的进度，将重新开始。",
        "interrupt_notice": "检测到 Ctrl+C，正在保存进度...",
        "interrupted": "进度已保存到 {path}。使用 --resume 再次运行以继续。",
        "interrupted_setup": "在翻译开始前被中断，未保存任何进度。",
        "invalid_version": "无效的版本 ID: {version}",
        "lang_file_missing": "在 {path} 中未找到 {target}",
        "lang_file_entries": "语言文件包含 {count} 个条目。",
        "languages_loaded": "已加载 {count} 种翻译语言。",
        "no_languages": "翻译器未返回任何语言。",
        "file_not_found": "找不到文件: {path}",
        "invalid_json": "输入不是有效的 JSON: {path} ({error})",
        "invalid_document": "输入无法翻译: {error}",
        "missing_dependency": "缺少依赖: {missing}",
        "source_failed": "无法准备源文件: {error}",
        "checkpoint_failed": "检查点错误: {error}",
        "translate_failed": "翻译失败: {error}",
        "export_failed": "写入输出失败: {error}",
    },
}


def t(key: str, *, lang: str | None = None, **kwargs) -> str:
    l = (lang or os.getenv("LANGRELAY_LANG") or "en").lower()
    if l not in MESSAGES:
        l = "en"
    msg = MESSAGES[l].get(key) or MESSAGES["en"].get(key) or key
    try:
        return msg.format(**kwargs)
    except (KeyError, IndexError):
        return msg
