"""
AI flows: product chatbot and personalized recommendations.

Each flow is a prompt template bound to a Pydantic input/output pair and run
through a LangChain chat model.
"""
import logging
import os
from typing import List, Optional

from langchain_core.exceptions import OutputParserException
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.output_parsers import PydanticOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, Field

from product_actions import get_products

logger = logging.getLogger(__name__)

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

CHATBOT_FALLBACK_ANSWER = "I'm sorry, I couldn't generate a response at this moment. Please try again."
RATE_LIMITED_MESSAGE = "Our assistant is busy right now. Please try again in a moment."
GENERIC_FAILURE_MESSAGE = "Sorry, something went wrong while contacting our assistant."


class ProductChatbotInput(BaseModel):
    question: str = Field(..., min_length=1, description="The user's question about Earth Puran products.")


class ProductChatbotOutput(BaseModel):
    answer: str = Field(..., description="The assistant's answer to the user's question.")


class ProductRecommendationsInput(BaseModel):
    userPreferences: str = Field(..., description="A description of the user's product preferences.")
    browsingHistory: str = Field(..., description="The user's browsing history.")
    trendingProducts: str = Field(..., description="Currently trending products.")


class ProductRecommendationsOutput(BaseModel):
    recommendedProducts: List[str] = Field(..., description="A list of recommended product names.")
    reasoning: str = Field(..., description="The reasoning behind the recommendations.")


CHATBOT_SYSTEM_PROMPT = """\
You are a friendly and knowledgeable AI assistant for Earth Puran.
Earth Puran is a brand that exclusively sells high-quality, natural, and organic beauty products.
Your role is to answer customer questions about Earth Puran products, their benefits, general ingredient \
information (related to natural/organic products), and how to use them.

Key instructions:
- Always maintain a polite and helpful tone.
- Focus exclusively on Earth Puran products. Do not mention or recommend products from other brands.
- Use the inventory below for availability and price questions. If a detail is not listed, say you don't \
have that information and suggest checking the product page or contacting customer support.
- Do not make up information. Politely decline questions outside your scope (e.g., medical advice).

Current inventory:
{inventory}

{format_instructions}"""

RECOMMENDATIONS_SYSTEM_PROMPT = """\
You are an expert e-commerce product recommender.

Based on the user's preferences, browsing history, and trending products, recommend a list of products \
the user might be interested in, and explain why you are recommending them.

{format_instructions}"""

RECOMMENDATIONS_USER_PROMPT = """\
User Preferences: {userPreferences}
Browsing History: {browsingHistory}
Trending Products: {trendingProducts}"""


def get_chat_model() -> BaseChatModel:
    return ChatOpenAI(model=OPENAI_MODEL, temperature=0.3)


def build_inventory_list() -> str:
    lines = []
    for p in get_products():
        availability = f"{p.stock} in stock" if p.stock > 0 else "out of stock"
        lines.append(f"- {p.name} ({p.category}, {p.brand}): INR {p.price:.2f}, {availability}")
    return "\n".join(lines) or "- No products are currently listed."


def product_chatbot(data: ProductChatbotInput, model: Optional[BaseChatModel] = None) -> ProductChatbotOutput:
    parser = PydanticOutputParser(pydantic_object=ProductChatbotOutput)
    prompt = ChatPromptTemplate.from_messages([
        ("system", CHATBOT_SYSTEM_PROMPT),
        ("human", "{question}"),
    ]).partial(format_instructions=parser.get_format_instructions())
    chain = prompt | (model or get_chat_model()) | parser

    try:
        output = chain.invoke({"question": data.question, "inventory": build_inventory_list()})
    except OutputParserException as e:
        logger.warning("Chatbot returned unparseable output: %s", e)
        return ProductChatbotOutput(answer=CHATBOT_FALLBACK_ANSWER)
    if not output.answer.strip():
        return ProductChatbotOutput(answer=CHATBOT_FALLBACK_ANSWER)
    return output


def get_product_recommendations(
    data: ProductRecommendationsInput, model: Optional[BaseChatModel] = None
) -> ProductRecommendationsOutput:
    parser = PydanticOutputParser(pydantic_object=ProductRecommendationsOutput)
    prompt = ChatPromptTemplate.from_messages([
        ("system", RECOMMENDATIONS_SYSTEM_PROMPT),
        ("human", RECOMMENDATIONS_USER_PROMPT),
    ]).partial(format_instructions=parser.get_format_instructions())
    chain = prompt | (model or get_chat_model()) | parser
    return chain.invoke(data.model_dump())


def is_rate_limited(exc: Exception) -> bool:
    status = getattr(exc, "status_code", None) or getattr(getattr(exc, "response", None), "status_code", None)
    return status == 429


def describe_ai_error(exc: Exception) -> str:
    if is_rate_limited(exc):
        return RATE_LIMITED_MESSAGE
    return GENERIC_FAILURE_MESSAGE
