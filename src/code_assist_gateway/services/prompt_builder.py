"""System-prompt assembly for the two operating modes.

*Edit mode* asks the model for bare replacement code; *explanation mode*
asks for a concise answer whose code blocks are fenced and labelled with
their project-relative path.
"""

from __future__ import annotations

import json

from code_assist_gateway.domain.entities import GenerationRequest, TemplateConfig
from code_assist_gateway.services.file_tree import NO_FILES, format_file_tree

NO_CONTEXT = "No additional context provided"

# ── Prompt templates ────────────────────────────────────────────────────────

TEMPLATE_CONTEXT = """\
Project Template: {name}

Current File Structure:
{file_structure}

Conventions:
{conventions}

Dependencies:
{dependencies}

Scripts:
{scripts}
"""

EDIT_PROMPT = """\
You are an AI code editor working in a {template_type} project. Your task is \
to modify the given code based on the user's instructions. Only output the \
modified code, without any explanations or markdown formatting. The code \
should be a direct replacement for the existing code. If there is no code to \
modify, refer to the active file content and only output the code that is \
relevant to the user's instructions.
{template_context}

File: {file_name}
Line: {line}

Context:
{context}

Active File Content:
{active_file_content}

Instructions: {instruction}

Respond only with the modified code that can directly replace the existing code."""

EXPLANATION_PROMPT = """\
You are an intelligent programming assistant for a {template_type} project. \
Please respond to the following request concisely. When providing code:

1. Format it using triple backticks (```) with the appropriate language identifier.
2. Always specify the complete file path in the format:
   {project_name}/filepath/to/file.ext

3. If creating a new file, specify the path as:
   {project_name}/filepath/to/file.ext (new file)

4. Format your code blocks as:

{project_name}/filepath/to/file.ext
```language
code here
```

If multiple files are involved, repeat the format for each file. Provide a \
clear and concise explanation along with any code snippets. Keep your \
response brief and to the point.

This is the project template:
{template_context}

{context_section}
{active_file_section}"""


# ── Builders ────────────────────────────────────────────────────────────────


def build_template_context(
    template: TemplateConfig | None, request: GenerationRequest
) -> str:
    """Render template metadata and the file tree; empty when no template resolved."""
    if template is None:
        return ""

    file_structure = NO_FILES if request.files is None else format_file_tree(request.files)
    return "\n" + TEMPLATE_CONTEXT.format(
        name=template.name,
        file_structure=file_structure,
        conventions="\n".join(template.conventions),
        dependencies=json.dumps(template.dependencies, indent=2),
        scripts=json.dumps(template.scripts, indent=2),
    )


def build_edit_prompt(request: GenerationRequest, template: TemplateConfig | None) -> str:
    return EDIT_PROMPT.format(
        template_type=request.template_type or "",
        template_context=build_template_context(template, request),
        file_name=request.file_name or "",
        line="" if request.line is None else request.line,
        context=request.context or NO_CONTEXT,
        active_file_content=request.active_file_content or "",
        instruction=request.instruction,
    )


def build_explanation_prompt(
    request: GenerationRequest, template: TemplateConfig | None
) -> str:
    context_section = f"Context:\n{request.context}\n" if request.context else ""
    active_file_section = (
        f"Active File Content:\n{request.active_file_content}\n"
        if request.active_file_content
        else ""
    )
    return EXPLANATION_PROMPT.format(
        template_type=request.template_type or "",
        project_name=request.project_name or "",
        template_context=build_template_context(template, request),
        context_section=context_section,
        active_file_section=active_file_section,
    )


def build_system_prompt(
    request: GenerationRequest, template: TemplateConfig | None
) -> str:
    """Return the system instruction for *request* in its operating mode."""
    if not request.messages:
        raise ValueError("A generation request needs at least one message.")
    if request.is_edit_mode:
        return build_edit_prompt(request, template)
    return build_explanation_prompt(request, template)
