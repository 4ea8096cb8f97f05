import json

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.runnables import RunnableLambda

from ai_flows import (
    CHATBOT_FALLBACK_ANSWER,
    GENERIC_FAILURE_MESSAGE,
    RATE_LIMITED_MESSAGE,
    ProductChatbotInput,
    ProductRecommendationsInput,
    build_inventory_list,
    describe_ai_error,
    get_product_recommendations,
    is_rate_limited,
    product_chatbot,
)


class RateLimited(Exception):
    status_code = 429


def test_inventory_list_reflects_catalog(sample_products):
    inventory = build_inventory_list()
    assert "- Aloe Gel (Skincare, Earth Puran): INR 100.00, 5 in stock" in inventory
    assert "Lip Balm (Makeup, Earth Puran): INR 250.00, out of stock" in inventory


def test_inventory_list_empty_catalog():
    assert build_inventory_list() == "- No products are currently listed."


def test_chatbot_answers(sample_products):
    model = FakeListChatModel(responses=[json.dumps({"answer": "Aloe Gel is in stock."})])
    output = product_chatbot(ProductChatbotInput(question="Is the aloe gel available?"), model=model)
    assert output.answer == "Aloe Gel is in stock."


@pytest.mark.parametrize("response", ["not json at all", json.dumps({"answer": "   "})])
def test_chatbot_falls_back_on_unusable_output(response):
    model = FakeListChatModel(responses=[response])
    output = product_chatbot(ProductChatbotInput(question="Hello?"), model=model)
    assert output.answer == CHATBOT_FALLBACK_ANSWER


def test_chatbot_propagates_model_errors():
    def fail(_):
        raise RateLimited("slow down")

    with pytest.raises(RateLimited):
        product_chatbot(ProductChatbotInput(question="Hello?"), model=RunnableLambda(fail))


def test_recommendations():
    response = {"recommendedProducts": ["Face Oil", "Aloe Gel"], "reasoning": "You like skincare."}
    model = FakeListChatModel(responses=[json.dumps(response)])
    data = ProductRecommendationsInput(
        userPreferences="natural skincare",
        browsingHistory="Aloe Gel",
        trendingProducts="Face Oil",
    )
    output = get_product_recommendations(data, model=model)
    assert output.recommendedProducts == ["Face Oil", "Aloe Gel"]
    assert output.reasoning == "You like skincare."


def test_error_descriptions():
    class Response:
        status_code = 429

    class WrappedError(Exception):
        response = Response()

    assert is_rate_limited(RateLimited())
    assert is_rate_limited(WrappedError())
    assert not is_rate_limited(ValueError("boom"))
    assert describe_ai_error(RateLimited()) == RATE_LIMITED_MESSAGE
    assert describe_ai_error(ValueError("boom")) == GENERIC_FAILURE_MESSAGE
