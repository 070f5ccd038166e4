"""
Prompt Assembler（确定性，不依赖时间/随机数）。

同一份 `ReviewRequest` 可以渲染成三种等价形状，文件顺序和内容完全一致：
- flat：preamble + 所有文件段落拼成一段文本（text-completion 后端）
- system + user：preamble 作为 system，文件段落作为单条 user（Anthropic）
- chat 序列：system preamble、每个文件一条 user、最后一条开放式提问（chat 后端）
"""

from __future__ import annotations

from review_action.llm.client import ChatMessage
from review_action.review.models import ReviewableFile
from review_action.review.models import ReviewRequest

REVIEWER_PREAMBLE = (
    "You are conducting a code review of changes in a pull request. "
    "Please analyze the following files and provide feedback on:\n"
    "\n"
    "1. Code quality and best practices\n"
    "2. Potential bugs or issues\n"
    "3. Security concerns\n"
    "4. Performance considerations\n"
    "5. Suggestions for improvements\n"
    "\n"
    'For each file, focus on the changed portions (indicated in the "patch").'
)

FILES_HEADER = "Here are the files to review:"
NO_PATCH_PLACEHOLDER = "(No patch data available)"
FEEDBACK_QUESTION = "What is your feedback?"


def build_review_request(files: list[ReviewableFile], preamble: str = REVIEWER_PREAMBLE) -> ReviewRequest:
    return ReviewRequest(preamble=preamble, files=list(files))


def render_file_section(file: ReviewableFile) -> str:
    """单个文件段落：filename / status / patch / full content。"""
    patch = file.patch or NO_PATCH_PLACEHOLDER
    return (
        "---\n"
        f"Filename: {file.path}\n"
        f"Status: {file.status}\n"
        "\n"
        "Patch:\n"
        f"{patch}\n"
        "\n"
        "Full Content:\n"
        "```\n"
        f"{file.content}\n"
        "```\n"
    )


def render_files_block(request: ReviewRequest) -> str:
    sections = "\n".join(render_file_section(f) for f in request.files)
    return f"{FILES_HEADER}\n\n{sections}"


def render_flat_prompt(request: ReviewRequest) -> str:
    return f"{request.preamble}\n\n{render_files_block(request)}"


def render_chat_messages(request: ReviewRequest) -> list[ChatMessage]:
    messages = [ChatMessage(role="system", content=request.preamble)]
    messages.extend(ChatMessage(role="user", content=render_file_section(f)) for f in request.files)
    messages.append(ChatMessage(role="user", content=FEEDBACK_QUESTION))
    return messages
