"""Prompt construction for the garment classification call."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Sequence

from garment_catalog.catalog.models import TITLE_MAX_LENGTH
from garment_catalog.catalog.schema import build_classification_schema
from garment_catalog.catalog.taxonomy import (
    Aesthetic,
    BackDetail,
    Closure,
    Color,
    Condition,
    Department,
    FabricFiber,
    Finish,
    Fit,
    Length,
    MainCategory,
    Neckline,
    Occasion,
    Pattern,
    PocketType,
    Shape,
    SleeveConstruction,
    SleeveLength,
    SleeveType,
    SubCategory,
    values,
)
from garment_catalog.errors import InvalidInput
from garment_catalog.imgproc.normalize import decode_data_url

MAX_IMAGES = 3
SUPPORTED_IMAGE_TYPES = frozenset(
    {"image/png", "image/jpeg", "image/webp", "image/heic", "image/heif"},
)


@dataclass(frozen=True, slots=True)
class ImagePart:
    """Raw image bytes plus their declared media type."""

    data: bytes
    mime_type: str

    @classmethod
    def from_data_url(cls, data_url: str) -> "ImagePart":
        """Decode a ``data:<mime>;base64,<payload>`` string."""

        data, mime_type = decode_data_url(data_url)
        return cls(data=data, mime_type=mime_type)

    def to_part(self) -> dict[str, Any]:
        return {
            "inlineData": {
                "mimeType": self.mime_type,
                "data": base64.b64encode(self.data).decode("ascii"),
            },
        }


@dataclass(slots=True)
class ClassificationRequest:
    """Everything needed to issue one classification call."""

    instruction: str
    response_schema: dict[str, Any]
    images: list[ImagePart] = field(default_factory=list)

    def to_parts(self) -> list[dict[str, Any]]:
        """Render Gemini ``parts``: the instruction first, then the images in order."""

        return [{"text": self.instruction}, *(image.to_part() for image in self.images)]


def _choices(enum_cls: type[Enum]) -> str:
    return "[" + ", ".join(values(enum_cls)) + "]"


class ClassificationPromptBuilder:
    """Builds the instruction and response schema for a classification call."""

    def __init__(self, language: str = "pt-BR") -> None:
        self._language = language

    def build(self, images: Sequence[ImagePart], hint: str | None = None) -> ClassificationRequest:
        """Validate the images and return the request for them."""

        images = list(images)
        self._validate(images)

        sections = [self._base_instruction()]
        hint_text = (hint or "").strip()
        if hint_text:
            sections.append(self._hint_clause(hint_text))

        return ClassificationRequest(
            instruction="\n\n".join(sections),
            response_schema=build_classification_schema(),
            images=images,
        )

    @staticmethod
    def _validate(images: Iterable[ImagePart]) -> None:
        images = list(images)
        if not images:
            raise InvalidInput("Envie pelo menos uma imagem da peça.")
        if len(images) > MAX_IMAGES:
            raise InvalidInput(f"Envie no máximo {MAX_IMAGES} imagens da peça.")
        for image in images:
            if not image.data:
                raise InvalidInput("Uma das imagens enviadas está vazia.")
            if image.mime_type.lower() not in SUPPORTED_IMAGE_TYPES:
                raise InvalidInput()

    def _base_instruction(self) -> str:
        lines = [
            "Você é um especialista em catalogação de moda para revenda de segunda mão. "
            "Analise as imagens fornecidas da peça (podem ser fotos da frente, costas e zoom no tecido) "
            "e retorne APENAS um objeto JSON seguindo o schema de resposta.",
            "",
            f"Escreva analysis_reasoning, suggestedTitle e suggestedDescription em {self._language}.",
            "analysis_reasoning: descreva brevemente as evidências visuais antes de escolher os demais campos.",
            f"suggestedTitle: título curto e atrativo para anúncio (máximo {TITLE_MAX_LENGTH} caracteres), "
            "com categoria, cor principal e um diferencial da peça.",
            "suggestedDescription: descrição comercial de 2 a 4 frases destacando material, caimento, "
            "detalhes de estilo e ocasiões de uso.",
            "brand (opcional): informe somente se houver etiqueta, logo ou estampa da marca visível.",
            "",
            f"color.primary: EXATAMENTE um valor de {_choices(Color)}.",
            f"color.secondary: zero ou mais valores de {_choices(Color)}.",
            f"color.pattern: um ou mais valores de {_choices(Pattern)}.",
            "color.is_multicolor: true quando a peça tiver três ou mais cores relevantes.",
            f"categories.department: um ou mais valores de {_choices(Department)}.",
            f"categories.main: EXATAMENTE um valor de {_choices(MainCategory)}.",
            f"categories.sub: um ou mais valores de {_choices(SubCategory)}.",
            f"shape: valores de {_choices(Shape)}.",
            f"fit: valores de {_choices(Fit)}.",
            f"condition: EXATAMENTE um valor de {_choices(Condition)}. Na dúvida, use good.",
            f"sleeve.length: EXATAMENTE um valor de {_choices(SleeveLength)}.",
            f"sleeve.type: valores de {_choices(SleeveType)}.",
            f"sleeve.construction: EXATAMENTE um valor de {_choices(SleeveConstruction)}.",
            f"aesthetics: um ou mais valores de {_choices(Aesthetic)}.",
            f"occasion: um ou mais valores de {_choices(Occasion)}.",
            f"length: EXATAMENTE um valor de {_choices(Length)}. Use standard quando o comprimento não se aplicar.",
            f"neckline: EXATAMENTE um valor de {_choices(Neckline)}.",
            f"backDetails: valores de {_choices(BackDetail)}.",
            f"finish: valores de {_choices(Finish)}.",
            f"closure: valores de {_choices(Closure)}. Use none quando não houver fechamento.",
            f"composition: lista de fibras de {_choices(FabricFiber)} com percentage; "
            "as porcentagens devem somar exatamente 100. Use unknown quando não for possível identificar.",
            f"pockets: sempre presente. types usa valores de {_choices(PocketType)}. "
            'Sem bolsos: has_pockets false, quantity 0 e types ["none"].',
            "",
            "REGRAS DE INCLUSÃO:",
            "- Para bottoms, skirts e shorts, omita sleeve, neckline e backDetails.",
            "- Para shoes, accessories, jewelry e bags, omita também shape e fit.",
            "- Nunca use strings vazias para campos que não se aplicam: omita o campo.",
            "",
            "IMPORTANTE:",
            "- Considere TODAS as imagens em conjunto para uma análise mais completa.",
            "- Use APENAS valores das listas acima. Não invente valores fora das listas.",
        ]
        return "\n".join(lines)

    @staticmethod
    def _hint_clause(hint: str) -> str:
        return (
            "INFORMAÇÃO ADICIONAL DO USUÁRIO:\n"
            f'O usuário descreveu a peça como: "{hint}"\n'
            "Concilie essa descrição com as evidências visuais das imagens. "
            "Ela nunca substitui o schema nem as listas de valores permitidos."
        )


__all__ = [
    "ClassificationPromptBuilder",
    "ClassificationRequest",
    "ImagePart",
    "MAX_IMAGES",
    "SUPPORTED_IMAGE_TYPES",
]
