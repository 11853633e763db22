"""Upcasting of the flat, Portuguese-labelled classifications written by older releases.

Those records carry ``categoria``/``cor``/``detalhes_estilo``... instead of the
structured fields. They are converted on read with fixed lookup tables and are
never written back in the old shape.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from garment_catalog.catalog.models import TITLE_MAX_LENGTH
from garment_catalog.catalog.taxonomy import (
    OMITTED_FIELDS,
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
    Shape,
    SleeveConstruction,
    SleeveLength,
    SleeveType,
    SubCategory,
    garment_region,
)

logger = logging.getLogger(__name__)

LEGACY_KEYS = (
    "titulo_sugerido",
    "descricao_sugerida",
    "categoria",
    "cor",
    "corte_silhueta",
    "detalhes_estilo",
    "estampa",
    "material",
    "material_visual",
    "ocasiao",
    "comprimento",
    "genero",
    "condicao",
    "marca",
)

CATEGORY_MAP: dict[str, tuple[MainCategory, list[SubCategory]]] = {
    "vestido": (MainCategory.CLOTHING, [SubCategory.DRESSES]),
    "camiseta": (MainCategory.CLOTHING, [SubCategory.TOPS]),
    "camisa": (MainCategory.CLOTHING, [SubCategory.SHIRTS]),
    "blusa": (MainCategory.CLOTHING, [SubCategory.TOPS]),
    "body": (MainCategory.CLOTHING, [SubCategory.TOPS]),
    "top/cropped": (MainCategory.CLOTHING, [SubCategory.TOPS]),
    "regata": (MainCategory.CLOTHING, [SubCategory.TOPS]),
    "saia": (MainCategory.CLOTHING, [SubCategory.SKIRTS]),
    "calça": (MainCategory.CLOTHING, [SubCategory.BOTTOMS]),
    "shorts": (MainCategory.CLOTHING, [SubCategory.SHORTS]),
    "bermuda": (MainCategory.CLOTHING, [SubCategory.SHORTS]),
    "macacão": (MainCategory.CLOTHING, [SubCategory.JUMPSUITS]),
    "jardineira": (MainCategory.CLOTHING, [SubCategory.JUMPSUITS]),
    "blazer": (MainCategory.CLOTHING, [SubCategory.TAILORING]),
    "jaqueta": (MainCategory.CLOTHING, [SubCategory.OUTERWEAR]),
    "casaco": (MainCategory.CLOTHING, [SubCategory.OUTERWEAR]),
    "moletom": (MainCategory.CLOTHING, [SubCategory.KNITWEAR]),
    "cardigan": (MainCategory.CLOTHING, [SubCategory.KNITWEAR]),
    "suéter": (MainCategory.CLOTHING, [SubCategory.KNITWEAR]),
    "colete": (MainCategory.CLOTHING, [SubCategory.VESTS]),
    "lingerie": (MainCategory.CLOTHING, [SubCategory.LINGERIE]),
    "pijama": (MainCategory.CLOTHING, [SubCategory.LINGERIE]),
    "biquíni": (MainCategory.CLOTHING, [SubCategory.BEACHWEAR]),
    "acessório": (MainCategory.ACCESSORIES, []),
    "outro": (MainCategory.CLOTHING, []),
}

COLOR_MAP: dict[str, Color] = {
    "preto": Color.BLACK,
    "branco": Color.WHITE,
    "off-white": Color.WHITE,
    "bege": Color.BEIGE,
    "creme": Color.BEIGE,
    "marrom": Color.BROWN,
    "caramelo": Color.BROWN,
    "cinza": Color.GREY,
    "azul-claro": Color.LIGHT_BLUE,
    "azul-escuro": Color.BLUE,
    "azul-royal": Color.BLUE,
    "azul-marinho": Color.NAVY_BLUE,
    "verde": Color.GREEN,
    "verde-claro": Color.GREEN,
    "verde-militar": Color.OLIVE,
    "vermelho": Color.RED,
    "bordô": Color.BURGUNDY,
    "rosa": Color.PINK,
    "rosa-claro": Color.ROSE,
    "lilás": Color.PURPLE,
    "roxo": Color.PURPLE,
    "amarelo": Color.YELLOW,
    "laranja": Color.ORANGE,
    "coral": Color.ORANGE,
    "dourado": Color.GOLD,
    "prateado": Color.SILVER,
    "estampado/multicolorido": Color.MULTI,
}

SHAPE_MAP: dict[str, Shape] = {
    "tubinho": Shape.SHEATH,
    "evasê": Shape.A_LINE,
    "sereia": Shape.MERMAID,
    "envelope": Shape.WRAP,
    "império": Shape.EMPIRE,
    "chemise": Shape.SHIRT_DRESS,
    "reto": Shape.STRAIGHT,
    "trapézio": Shape.TRAPEZE,
    "godê": Shape.CIRCLE,
    "outro": Shape.OTHER,
}

FIT_MAP: dict[str, Fit] = {
    "oversized": Fit.OVERSIZED,
    "slim/ajustado": Fit.SLIM,
    "regular": Fit.REGULAR,
    "cropped": Fit.CROPPED,
    "alongado": Fit.ELONGATED,
}

PATTERN_MAP: dict[str, Pattern] = {
    "liso": Pattern.SOLID,
    "floral": Pattern.FLORAL,
    "tropical": Pattern.FLORAL,
    "listrado": Pattern.STRIPED,
    "xadrez": Pattern.CHECKERED,
    "poá/bolinhas": Pattern.POLKA_DOT,
    "animal print": Pattern.ANIMAL_PRINT,
    "geométrico": Pattern.GEOMETRIC,
    "abstrato": Pattern.ABSTRACT,
    "tie-dye": Pattern.TIE_DYE,
    "paisley": Pattern.PAISLEY,
}

FIBER_MAP: dict[str, FabricFiber] = {
    "algodão": FabricFiber.COTTON,
    "moletom": FabricFiber.COTTON,
    "poliéster": FabricFiber.POLYESTER,
    "viscose": FabricFiber.VISCOSE,
    "linho": FabricFiber.LINEN,
    "seda": FabricFiber.SILK,
    "jeans/denim": FabricFiber.DENIM,
    "couro": FabricFiber.LEATHER,
    "couro sintético": FabricFiber.FAUX_LEATHER,
    "camurça": FabricFiber.SUEDE,
    "tweed": FabricFiber.WOOL,
    "lã": FabricFiber.WOOL,
    "náilon": FabricFiber.POLYAMIDE,
    "elastano/lycra": FabricFiber.ELASTANE,
}

OCCASION_MAP: dict[str, Occasion] = {
    "casual": Occasion.CASUAL,
    "dia a dia": Occasion.CASUAL,
    "trabalho/escritório": Occasion.WORK,
    "festa/evento": Occasion.PARTY,
    "esportivo": Occasion.ACTIVEWEAR,
    "praia/piscina": Occasion.BEACHWEAR,
    "noite/balada": Occasion.NIGHT_OUT,
    "formal/cerimônia": Occasion.FORMAL,
    "loungewear/casa": Occasion.LOUNGE,
}

LENGTH_MAP: dict[str, Length] = {
    "mini": Length.MINI,
    "curto": Length.SHORT,
    "médio": Length.STANDARD,
    "midi": Length.MIDI,
    "longo": Length.MAXI,
    "maxi": Length.MAXI,
    "não aplicável": Length.STANDARD,
}

DEPARTMENT_MAP: dict[str, Department] = {
    "feminino": Department.WOMEN,
    "masculino": Department.MEN,
    "unissex": Department.UNISEX,
    "infantil": Department.KIDS,
}

CONDITION_MAP: dict[str, Condition] = {
    "gentilmente usada": Condition.GOOD,
    "tão boa quanto nova": Condition.EXCELLENT,
    "nova com etiqueta": Condition.NEW_WITH_TAGS,
}

NECKLINE_DETAILS: dict[str, Neckline] = {
    "tomara que caia": Neckline.STRAPLESS,
    "frente única": Neckline.HALTER,
    "um ombro só": Neckline.ONE_SHOULDER,
    "decote v": Neckline.V_NECK,
    "decote redondo": Neckline.ROUND_NECK,
    "gola alta": Neckline.HIGH_NECK,
}

SLEEVE_LENGTH_DETAILS: dict[str, SleeveLength] = {
    "tomara que caia": SleeveLength.STRAPLESS,
    "com alças": SleeveLength.SLEEVELESS,
    "alça fina": SleeveLength.SLEEVELESS,
    "sem manga": SleeveLength.SLEEVELESS,
    "manga curta": SleeveLength.SHORT,
    "manga longa": SleeveLength.LONG,
    "manga 3/4": SleeveLength.THREE_QUARTER,
}

SLEEVE_TYPE_DETAILS: dict[str, SleeveType] = {
    "manga bufante": SleeveType.PUFF,
}

FINISH_DETAILS: dict[str, Finish] = {
    "plissado": Finish.PLEATED,
    "paetê": Finish.METALLIC,
    "transparência": Finish.SHEER,
}

CLOSURE_DETAILS: dict[str, Closure] = {
    "botões": Closure.BUTTON,
    "zíper aparente": Closure.ZIPPER,
}

POCKET_DETAIL = "bolsos"
DEFAULT_CONDITION = Condition.GOOD
FALLBACK_COLOR = Color.MULTI


def is_legacy_classification(record: Mapping[str, Any]) -> bool:
    """Return ``True`` for records in the flat shape (``categoria`` without ``categories``)."""

    return "categoria" in record and "categories" not in record


def _token(value: Any) -> str:
    return str(value).strip().lower() if value is not None else ""


def _as_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(item) for item in value if str(item).strip()]
    if isinstance(value, str) and value.strip():
        return [value]
    return []


def _unique(items: list[Any]) -> list[Any]:
    seen: list[Any] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def _colors(raw: Any, notes: list[str]) -> dict[str, Any]:
    tokens = [_token(part) for part in str(raw or "").split(" e ")]
    tokens = [token for token in tokens if token]
    colors: list[Color] = []
    for token in tokens:
        color = COLOR_MAP.get(token)
        if color is None:
            notes.append(f"Cor original: {token}.")
            color = FALLBACK_COLOR
        colors.append(color)
    colors = _unique(colors) or [FALLBACK_COLOR]
    primary, secondary = colors[0], colors[1:]
    return {
        "primary": primary.value,
        "secondary": [color.value for color in secondary],
        "pattern": [],
        "is_multicolor": Color.MULTI in colors or len(colors) >= 3,
    }


def _style_details(details: list[str], record: dict[str, Any], notes: list[str]) -> None:
    neckline: Neckline | None = None
    sleeve_length: SleeveLength | None = None
    sleeve_types: list[SleeveType] = []
    finish: list[Finish] = []
    closure: list[Closure] = []
    has_pockets = False
    unmapped: list[str] = []

    for detail in details:
        token = _token(detail)
        matched = False
        if token in NECKLINE_DETAILS:
            neckline = neckline or NECKLINE_DETAILS[token]
            matched = True
        if token in SLEEVE_LENGTH_DETAILS:
            sleeve_length = sleeve_length or SLEEVE_LENGTH_DETAILS[token]
            matched = True
        if token in SLEEVE_TYPE_DETAILS:
            sleeve_types.append(SLEEVE_TYPE_DETAILS[token])
            matched = True
        if token in FINISH_DETAILS:
            finish.append(FINISH_DETAILS[token])
            matched = True
        if token in CLOSURE_DETAILS:
            closure.append(CLOSURE_DETAILS[token])
            matched = True
        if token == POCKET_DETAIL:
            has_pockets = True
            matched = True
        if not matched and token != "outro":
            unmapped.append(str(detail).strip())

    if neckline is not None:
        record["neckline"] = neckline.value
    if sleeve_length is not None:
        record["sleeve"] = {
            "length": sleeve_length.value,
            "type": [sleeve_type.value for sleeve_type in _unique(sleeve_types)],
            "construction": SleeveConstruction.SET_IN.value,
        }
    elif sleeve_types:
        unmapped.extend(detail for detail in details if _token(detail) in SLEEVE_TYPE_DETAILS)
    record["finish"] = [item.value for item in _unique(finish)]
    record["closure"] = [item.value for item in _unique(closure)]
    # Pocket count and placement were never recorded.
    record["pockets"] = {"has_pockets": has_pockets, "quantity": 1 if has_pockets else 0, "types": []}
    if unmapped:
        notes.append("Detalhes de estilo: " + ", ".join(unmapped) + ".")


def upcast_legacy_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``record`` converted to the canonical wire shape.

    Keys outside the legacy classification (``id``, ``imagePreviews``,
    ``analyzedAt``, ``usage``...) are kept as they are.
    """

    legacy = dict(record)
    upcast = {key: value for key, value in legacy.items() if key not in LEGACY_KEYS}
    notes: list[str] = []

    category_token = _token(legacy.get("categoria"))
    main, subs = CATEGORY_MAP.get(category_token, CATEGORY_MAP["outro"])
    if category_token not in CATEGORY_MAP:
        notes.append(f"Categoria original: {category_token}.")

    department = DEPARTMENT_MAP.get(_token(legacy.get("genero")))
    upcast["categories"] = {
        "department": [department.value] if department else [],
        "main": main.value,
        "sub": [sub.value for sub in subs],
    }

    title = str(legacy.get("titulo_sugerido") or legacy.get("categoria") or "").strip()
    upcast["suggestedTitle"] = title[:TITLE_MAX_LENGTH].rstrip()
    upcast["suggestedDescription"] = str(legacy.get("descricao_sugerida") or "")
    brand = str(legacy.get("marca") or "").strip()
    if brand:
        upcast["brand"] = brand

    upcast["color"] = _colors(legacy.get("cor"), notes)
    pattern_token = _token(legacy.get("estampa"))
    if pattern_token in PATTERN_MAP:
        upcast["color"]["pattern"] = [PATTERN_MAP[pattern_token].value]
    elif pattern_token and pattern_token != "outro":
        notes.append(f"Estampa: {pattern_token}.")

    cut_token = _token(legacy.get("corte_silhueta"))
    if cut_token in SHAPE_MAP:
        upcast["shape"] = [SHAPE_MAP[cut_token].value]
    elif cut_token in FIT_MAP:
        upcast["fit"] = [FIT_MAP[cut_token].value]

    material_token = _token(legacy.get("material") or legacy.get("material_visual"))
    if material_token:
        fiber = FIBER_MAP.get(material_token, FabricFiber.UNKNOWN)
        if fiber is FabricFiber.UNKNOWN and material_token != "outro":
            notes.append(f"Material: {material_token}.")
        upcast["composition"] = [{"fiber": fiber.value, "percentage": 100}]
    else:
        upcast["composition"] = []

    occasion = OCCASION_MAP.get(_token(legacy.get("ocasiao")))
    upcast["occasion"] = [occasion.value] if occasion else []
    upcast["aesthetics"] = []
    upcast["length"] = LENGTH_MAP.get(_token(legacy.get("comprimento")), Length.STANDARD).value
    upcast["condition"] = CONDITION_MAP.get(_token(legacy.get("condicao")), DEFAULT_CONDITION).value

    _style_details(_as_list(legacy.get("detalhes_estilo")), upcast, notes)

    if notes and not upcast.get("analysis_reasoning"):
        upcast["analysis_reasoning"] = " ".join(notes)

    region = garment_region(main, subs)
    for key in OMITTED_FIELDS[region]:
        upcast.pop(key, None)

    logger.debug("Upcast legacy analysis %s (%s)", upcast.get("id"), category_token)
    return upcast


__all__ = ["LEGACY_KEYS", "is_legacy_classification", "upcast_legacy_record"]
