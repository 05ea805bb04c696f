import logging
from typing import Optional

from pdfstudio.services import llm_service
from pdfstudio.services.artifact_parser import Artifact, parse_artifact
from pdfstudio.services.llm_service import ModelInvoker
from pdfstudio.services.prompts import ArtifactKind, build_prompt

logger = logging.getLogger(__name__)

_TAGS = {
    ArtifactKind.quiz: "[QUIZ]",
    ArtifactKind.outline: "[OUTLINE]",
    ArtifactKind.mindmap: "[MINDMAP]",
}


async def generate_artifact(
    kind: ArtifactKind | str,
    text: Optional[str],
    invoke: Optional[ModelInvoker] = None,
) -> Artifact:
    """
    One generation attempt: build prompt → call model once → parse.
    Empty text raises UsageError before the model is touched.
    """
    kind = ArtifactKind(kind)
    tag = _TAGS[kind]
    prompt = build_prompt(kind, text)
    invoke = invoke or llm_service.complete

    logger.info(f"{tag} Starting generation ({len(text)} chars of source)...")
    raw = await invoke(prompt)
    artifact = parse_artifact(kind, raw)
    logger.info(f"{tag} ✓ Generated")
    return artifact
