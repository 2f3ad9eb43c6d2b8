"""Gemini API: post text, images, SEO articles, infographics, conversion copy and caption refinement."""
import asyncio
import base64
import json
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from medisocial.config import settings
from medisocial.errors import GenerationFailure
from medisocial.models.schemas import (
    ArticleRequest,
    ConversionRequest,
    ConversionResult,
    GeneratedArticle,
    InfographicData,
    InfographicRequest,
    PostCategory,
    PostContent,
    PostFormat,
    PostRequest,
    Tone,
)
from medisocial.utils.helpers import strip_code_fence
from medisocial.utils.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

BRAND_BRIEF = """Você escreve para o Dr. Carlos Franciozi (@dr.carlos_franciozi), cirurgião ortopedista especialista em joelho e medicina esportiva, em São Paulo.
Voz: médico experiente, acolhedor, baseado em evidências. Público: pacientes e atletas amadores.
Regras do CFM (Resolução 2.336/2023): sem promessa de resultado, sem sensacionalismo, sem antes/depois, sem preços, sem autopromoção exagerada."""

CATEGORY_LABELS = {
    PostCategory.PATHOLOGY: "Doenças do joelho",
    PostCategory.SURGERY: "Cirurgias",
    PostCategory.SPORTS: "Medicina esportiva",
    PostCategory.REHAB: "Reabilitação",
    PostCategory.LIFESTYLE: "Qualidade de vida",
    PostCategory.MYTHS: "Mitos e verdades",
}

TONE_LABELS = {
    Tone.PROFESSIONAL: "profissional e técnico, mas acessível",
    Tone.EDUCATIONAL: "educativo e didático",
    Tone.EMPATHETIC: "empático e acolhedor",
    Tone.MOTIVATIONAL: "motivador e positivo",
}

IMAGE_STYLE = (
    "Ilustração médica fotorealista, iluminação de estúdio suave, fundo limpo, paleta azul e branco. "
    "Sem texto, sem marca d'água, sem sangue, sem imagens chocantes."
)

# Lazy client to avoid import errors when API key is missing
_gemini_client: Any = None


def _get_client():
    """Return Google GenAI client. Uses google-genai SDK."""
    global _gemini_client
    if _gemini_client is None:
        try:
            from google import genai

            _gemini_client = genai.Client(api_key=settings.gemini_api_key)
        except Exception as e:
            logger.warning("gemini_client_init_failed", error=str(e))
            raise GenerationFailure("Chave da API Gemini ausente ou inválida.") from e
    return _gemini_client


def _error_message(err: Exception, fallback: str) -> str:
    """Turn API errors into a short user-facing message."""
    s = str(err).strip()
    if "billed users" in s or "only accessible to billed" in s:
        return "O Imagen exige uma conta Google Cloud com faturamento ativo."
    if "429" in s or "RESOURCE_EXHAUSTED" in s or "quota" in s.lower():
        return "Cota da API Gemini excedida. Tente novamente em alguns minutos."
    if "network is unreachable" in s.lower() or "timed out" in s.lower():
        return "Serviço de IA indisponível no momento. Tente novamente."
    return fallback


def _parse_model(text: str, model: type[ModelT]) -> ModelT:
    """Parse a (possibly fenced) JSON answer into a pydantic model."""
    data = json.loads(strip_code_fence(text))
    return model.model_validate(data)


class GeminiService:
    """GenerativeCapability over the google-genai SDK. The SDK is sync; calls run in a worker thread."""

    def __init__(self, text_model: str | None = None, image_model: str | None = None):
        self.text_model = text_model or settings.gemini_text_model
        self.image_model = image_model or settings.gemini_image_model

    # ----- text -----
    def _generate_json(self, prompt: str, model: type[ModelT], event: str, fallback: str) -> ModelT:
        client = _get_client()
        try:
            response = client.models.generate_content(
                model=self.text_model,
                contents=[prompt],
            )
            return _parse_model(response.text or "", model)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"{event}_unparseable", error=str(e))
            raise GenerationFailure("A IA retornou uma resposta em formato inesperado. Tente novamente.") from e
        except Exception as e:
            logger.exception(f"{event}_failed", error=str(e))
            raise GenerationFailure(_error_message(e, fallback)) from e

    async def generate_text(self, request: PostRequest) -> PostContent:
        """Instagram caption, headline, hashtags and an image brief for the post."""
        prompt = f"""{BRAND_BRIEF}

Crie um post para Instagram ({'Story vertical 9:16' if request.format is PostFormat.STORY else 'Feed quadrado 1:1'}).

Tema: {request.topic}
Categoria: {CATEGORY_LABELS[request.category]}
Tom: {TONE_LABELS[request.tone]}
Instruções adicionais: {request.custom_instructions or 'nenhuma'}

Regras:
- Headline curta e forte (máx. 8 palavras)
- Legenda com parágrafos curtos, linguagem simples, um CTA sutil ao final
- 5 a 10 hashtags relevantes em português
- Descrição de imagem em inglês, concreta, sem texto na imagem

Retorne SOMENTE JSON válido (sem markdown) com as chaves:
- "headline": string
- "caption": string
- "hashtags": lista de strings (com #)
- "image_prompt_description": string
"""
        return await asyncio.to_thread(
            self._generate_json, prompt, PostContent, "gemini_post_text", "Ocorreu um erro ao gerar o post."
        )

    async def generate_article(self, request: ArticleRequest) -> GeneratedArticle:
        prompt = f"""{BRAND_BRIEF}

Escreva um artigo de blog otimizado para SEO (Google) em português do Brasil.

Tema: {request.topic}
Palavras-chave: {', '.join(request.keywords) or 'defina as mais relevantes'}
Público: {request.target_audience}
Instruções adicionais: {request.custom_instructions or 'nenhuma'}

Estrutura: título com a palavra-chave principal, meta description de até 155 caracteres, slug, 4 a 6 seções com subtítulos, conclusão e referências científicas reais (autor, revista, ano).

Retorne SOMENTE JSON válido com as chaves:
"title", "meta_description", "slug", "keywords" (lista), "sections" (lista de {{"heading", "body"}}), "conclusion", "references" (lista de strings)
"""
        return await asyncio.to_thread(
            self._generate_json, prompt, GeneratedArticle, "gemini_article", "Erro ao gerar artigo."
        )

    async def generate_infographic(self, request: InfographicRequest) -> InfographicData:
        prompt = f"""{BRAND_BRIEF}

Estruture o conteúdo de um infográfico educativo.

Tema: {request.topic}
Categoria: {CATEGORY_LABELS[request.category]}
Instruções adicionais: {request.custom_instructions or 'nenhuma'}

Retorne SOMENTE JSON válido com as chaves:
- "title", "subtitle"
- "key_points": lista de 3 a 5 frases curtas
- "tips": lista de 3 dicas práticas
- "hero_image_prompt": descrição em inglês de uma imagem de capa
- "anatomy": {{"title", "description", "image_prompt"}} (ilustração anatômica em inglês)
"""
        return await asyncio.to_thread(
            self._generate_json, prompt, InfographicData, "gemini_infographic", "Erro no infográfico."
        )

    async def generate_conversion(self, request: ConversionRequest) -> ConversionResult:
        prompt = f"""{BRAND_BRIEF}

Crie um conteúdo de conversão que quebre objeções de pacientes sobre um procedimento.

Procedimento: {request.procedure}
Objeção principal: {request.objection or 'identifique as 3 mais comuns'}
Tom: {TONE_LABELS[request.tone]}
Instruções adicionais: {request.custom_instructions or 'nenhuma'}

Retorne SOMENTE JSON válido com as chaves:
"headline", "objections" (lista de {{"objection", "answer"}}), "caption", "call_to_action", "hashtags" (lista)
"""
        return await asyncio.to_thread(
            self._generate_json, prompt, ConversionResult, "gemini_conversion", "Erro na estratégia."
        )

    def _refine(self, text: str, instruction: str) -> str:
        client = _get_client()
        prompt = f"""{BRAND_BRIEF}

Reescreva a legenda abaixo seguindo a instrução. Mantenha as regras do CFM.
Instrução: {instruction}

Legenda:
{text}

Retorne apenas a nova legenda, sem comentários."""
        try:
            response = client.models.generate_content(model=self.text_model, contents=[prompt])
        except Exception as e:
            logger.exception("gemini_refine_failed", error=str(e))
            raise GenerationFailure(_error_message(e, "Falha ao refinar a legenda.")) from e
        refined = (response.text or "").strip()
        if not refined:
            raise GenerationFailure("Falha ao refinar a legenda.")
        return refined

    async def refine_text(self, text: str, instruction: str) -> str:
        return await asyncio.to_thread(self._refine, text, instruction)

    # ----- images -----
    def _render_image(self, prompt: str, format: PostFormat) -> str:
        """
        Render one image and return it as a data URL.
        Uses Imagen (generate_images) when the model is imagen-*, else Gemini (generate_content).
        """
        client = _get_client()
        full_prompt = f"{prompt.strip()}\n\n{IMAGE_STYLE}\nAspect ratio {format.aspect_ratio}."
        last_error: Optional[str] = None

        from google.genai import types

        model_id = (self.image_model or "").strip().lower()
        if model_id.startswith(("imagen-4", "imagen-3")):
            try:
                resp = client.models.generate_images(
                    model=self.image_model,
                    prompt=full_prompt[:2000],
                    config=types.GenerateImagesConfig(
                        number_of_images=1,
                        aspect_ratio=format.aspect_ratio,
                    ),
                )
                for gen in getattr(resp, "generated_images", None) or []:
                    raw = getattr(getattr(gen, "image", None), "image_bytes", None)
                    if raw:
                        return _data_url(raw)
            except Exception as e:
                logger.warning("imagen_generate_failed", model=self.image_model, error=str(e))
                last_error = _error_message(e, "Falha ao gerar a imagem.")

        models_to_try = [m for m in (self.image_model, "gemini-2.5-flash-image") if m and not m.lower().startswith("imagen")]
        for model in models_to_try:
            try:
                response = client.models.generate_content(
                    model=model,
                    contents=[full_prompt],
                    config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
                )
                parts = getattr(response, "parts", None)
                if parts is None and response.candidates and response.candidates[0].content.parts:
                    parts = response.candidates[0].content.parts
                for part in parts or []:
                    inline = getattr(part, "inline_data", None)
                    if inline is not None and getattr(inline, "data", None):
                        return _data_url(inline.data, inline.mime_type or "image/png")
            except Exception as e:
                logger.warning("gemini_image_try_failed", model=model, error=str(e))
                last_error = _error_message(e, "Falha ao gerar a imagem.")

        raise GenerationFailure(last_error or "A geração de imagem não produziu resultado.")

    async def generate_image(self, prompt: str, format: PostFormat) -> str:
        return await asyncio.to_thread(self._render_image, prompt, format)


def _data_url(raw: bytes | str, mime_type: str = "image/png") -> str:
    payload = raw if isinstance(raw, str) else base64.b64encode(raw).decode("ascii")
    return f"data:{mime_type};base64,{payload}"
