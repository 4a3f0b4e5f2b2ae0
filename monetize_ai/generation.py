"""
Streaming text generation for the strategy, trends and AI-guide tabs.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from google import genai
from google.genai import types as genai_types
from streamlit.logger import get_logger

from monetize_ai.config import DEFAULT_MODEL_NAME, Settings, load_settings

logger = get_logger(__name__)

STRATEGY_SYSTEM_INSTRUCTION = "You are a Silicon Valley product strategy expert."
STRATEGY_TEMPERATURE = 0.7

GENERATION_FAILED_MESSAGE = "Failed to generate strategy. Please check your API key and try again."

MARKET_TRENDS_PROMPT = """
What are the top 5 emerging trends in app monetization right now?
Focus on things like AI features, micro-SaaS, B2B vertical SaaS, and community-led growth.
Provide concise, bulleted insights.
"""

AI_MONETIZATION_PROMPT = """
You are a tech entrepreneur coach.
Provide a comprehensive guide on "How to Make Money with AI as a Developer".

Structure the response in Markdown:
1. **Building Micro-SaaS Wrappers**: How to wrap existing APIs (like Gemini/OpenAI) into niche value props.
2. **AI Agency / B2B Consulting**: Selling custom automation workflows to non-tech businesses.
3. **Data & Fine-Tuning**: Creating datasets or fine-tuned models for specific domains.
4. **Content Operations**: Using AI to scale content sites or marketing agencies.

For each section, provide a "Difficulty Level" (Low/Medium/High) and "Revenue Potential".
Keep it actionable and realistic.
"""

# Starter ideas offered on the AI guide tab; picking one fills the strategy input
IDEA_TEMPLATES = {
    "Niche AI wrapper": "I want to build an AI wrapper for a specific niche (e.g. Resume Rewriter). How should I monetize it?",
    "AI automation agency": "I want to start a B2B AI Automation Agency for local businesses. Create a business plan.",
    "AI tools course": "I want to create an educational course about using AI tools. How should I structure and price it?",
}

# Quick-start examples on the strategy tab
STRATEGY_EXAMPLES = {
    "🍳 Recipe Generator": "An AI-powered recipe generator based on ingredients in your fridge.",
    "🎨 Freelance Tools": "A specialized project management tool for freelance graphic designers.",
    "🏀 Sports Community": "A local community app for finding pickup sports games.",
}


class GenerationError(RuntimeError):
    """The text-generation service failed before the stream completed."""


def strategy_prompt(app_description: str) -> str:
    return f"""
You are an expert App Monetization Strategist and Product Manager.

The user has an app idea: "{app_description.strip()}".

Please provide a comprehensive monetization analysis. Structure your response with Markdown using the following sections:
1. **Core Value Proposition**: Briefly validate the value.
2. **Recommended Business Model**: (e.g., Freemium, Subscription, Paid, Ad-supported, Usage-based) and WHY.
3. **Pricing Strategy**: Specific price points to test.
4. **Growth Channels**: How to acquire the first 1,000 users.
5. **Potential Pitfalls**: What to avoid.
6. **Implementation Roadmap (Tutorial)**: A step-by-step technical and operational tutorial on how to build and launch the MVP for this specific idea.

Keep the tone professional, encouraging, and highly actionable.
"""


def make_client(settings: Optional[Settings] = None) -> genai.Client:
    settings = settings or load_settings()
    if not settings.has_api_key:
        raise GenerationError("No API key configured. Set GEMINI_API_KEY (or API_KEY).")
    return genai.Client(api_key=settings.api_key)


def stream_text(
    prompt: str,
    on_chunk: Callable[[str], None],
    *,
    client: Any = None,
    model_name: Optional[str] = None,
    system_instruction: Optional[str] = None,
    temperature: Optional[float] = None,
) -> str:
    """Stream a completion for `prompt`, forwarding each text fragment to `on_chunk`.

    Returns the full concatenated text. Any failure from the provider is
    logged and re-raised as `GenerationError`; there is no retry.
    """
    config = None
    if system_instruction is not None or temperature is not None:
        config = genai_types.GenerateContentConfig(system_instruction=system_instruction, temperature=temperature)

    full_text = ""
    try:
        if client is None:
            settings = load_settings()
            client = make_client(settings)
            model_name = model_name or settings.model_name
        stream = client.models.generate_content_stream(
            model=model_name or DEFAULT_MODEL_NAME,
            contents=prompt,
            config=config,
        )
        for chunk in stream:
            text = getattr(chunk, "text", None)
            if text:
                full_text += text
                on_chunk(text)
    except GenerationError:
        raise
    except Exception as e:
        logger.error(f"Text generation failed: {e}")
        raise GenerationError(str(e)) from e

    logger.info(f"Generation complete: {len(full_text)} characters")
    return full_text


def stream_strategy_analysis(app_description: str, on_chunk: Callable[[str], None], **kwargs) -> str:
    return stream_text(
        strategy_prompt(app_description),
        on_chunk,
        system_instruction=STRATEGY_SYSTEM_INSTRUCTION,
        temperature=STRATEGY_TEMPERATURE,
        **kwargs,
    )


def stream_market_trends(on_chunk: Callable[[str], None], **kwargs) -> str:
    return stream_text(MARKET_TRENDS_PROMPT, on_chunk, **kwargs)


def stream_ai_monetization_tips(on_chunk: Callable[[str], None], **kwargs) -> str:
    return stream_text(AI_MONETIZATION_PROMPT, on_chunk, **kwargs)
