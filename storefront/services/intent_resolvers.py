# storefront/services/intent_resolvers.py
import json
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from storefront.services.assistant_tools import Operation
from storefront.utils.errors import AssistantUnavailableError
from storefront.utils.logging import get_logger
from storefront.utils.settings import (
    ASSISTANT_MODE,
    OPENAI_API_KEY,
    OPENAI_MODEL,
    OPENAI_TIMEOUT,
)

logger = get_logger(__name__)


class IntentResolver:
    """
    Turns a user message into operations and the operation results into a reply.

    The assistant service runs resolve_intent, executes the operations,
    asks follow_up for more, executes those, then calls compose_reply.
    `results` is always a list of {"function", "args", "result"} dicts.
    """

    model: str = "unknown"
    usage: Optional[Dict[str, Any]] = None

    def resolve_intent(self, message: str) -> List[Operation]:
        raise NotImplementedError

    def follow_up(self, message: str, results: List[Dict[str, Any]]) -> List[Operation]:
        return []

    def compose_reply(self, message: str, results: List[Dict[str, Any]]) -> str:
        raise NotImplementedError


# ---------------------------------------------------------------- keyword

GREETING = """🤖 Привет! Я ваш помощник по покупкам в BigShop.

Я могу помочь вам:
🔍 Найти нужные продукты
🛒 Добавить товары в корзину
📋 Показать содержимое корзины
💡 Дать рекомендации

Попробуйте спросить: "Найди молочные продукты" или "Что посоветуешь на завтрак?\""""

_SEARCH_WORDS = ("найди", "покажи", "поиск")
_CART_WORDS = ("корзин", "что у меня")
_ADD_WORDS = ("добавь", "хочу купить")
_RECOMMEND_WORDS = ("посоветуй", "рекомендуй", "завтрак")

# message fragment -> name fragment searched in the catalog
_SEARCH_TOPICS = (
    (("молоч",), "молоко"),
    (("фрукт", "яблок", "банан"), "яблок"),
    (("хлеб",), "хлеб"),
)
_ADD_PRODUCTS = ("яблок", "банан", "молоко")


def _classify(text: str) -> str:
    if any(w in text for w in _SEARCH_WORDS):
        return "search"
    if any(w in text for w in _CART_WORDS):
        return "cart"
    if any(w in text for w in _ADD_WORDS):
        return "add"
    if any(w in text for w in _RECOMMEND_WORDS):
        return "recommend"
    return "greeting"


def _first_result(results, function: str) -> Optional[Dict[str, Any]]:
    for r in results:
        if r["function"] == function:
            return r["result"]
    return None


class KeywordIntentResolver(IntentResolver):
    """Fixed substring rules, no network. Used for demos and when no LLM is configured."""

    model = "keyword-assistant"

    def resolve_intent(self, message: str) -> List[Operation]:
        text = message.lower()
        intent = _classify(text)

        if intent == "search":
            args: Dict[str, Any] = {"limit": 5}
            for fragments, query in _SEARCH_TOPICS:
                if any(f in text for f in fragments):
                    args["query"] = query
                    break
            return [Operation("search_products", args)]

        if intent == "cart":
            return [Operation("get_cart_info", {})]

        if intent == "add":
            for name in _ADD_PRODUCTS:
                if name in text:
                    return [Operation("search_and_add_to_cart", {"productName": name, "quantity": 1})]
            return []

        if intent == "recommend":
            if "завтрак" in text:
                return [Operation("search_products", {"query": "хлеб", "limit": 3})]
            return [Operation("search_products", {"featured": True, "limit": 3})]

        return []

    def compose_reply(self, message: str, results: List[Dict[str, Any]]) -> str:
        intent = _classify(message.lower())

        if intent == "search":
            found = _first_result(results, "search_products") or {}
            products = found.get("products") or []
            if not products:
                return "😔 К сожалению, не нашел подходящих товаров. Попробуйте другой запрос!"
            lines = "\n".join(f"• {p['name']} - ${p['price']}" for p in products)
            return f"🛒 Вот что я нашел:\n\n{lines}\n\nХотите добавить что-то в корзину?"

        if intent == "cart":
            cart = _first_result(results, "get_cart_info") or {}
            if not cart.get("totalItems"):
                return "🛒 Ваша корзина пока пуста. Хотите что-нибудь добавить?"
            lines = "\n".join(
                f"• {i['name']} x{i['quantity']} - ${i['price']}" for i in cart["items"]
            )
            return (
                f"🛒 В вашей корзине:\n\n{lines}\n\n"
                f"Итого: {cart['totalItems']} товар(ов) на ${cart['totalAmount']}"
            )

        if intent == "add":
            added = _first_result(results, "search_and_add_to_cart")
            if added is None:
                return "🤔 Не могу понять, какой товар вы хотите добавить. Уточните, пожалуйста!"
            if added.get("success"):
                return f"✅ {added['message']} 🛒"
            return f"❌ {added['message']}"

        if intent == "recommend":
            found = _first_result(results, "search_products") or {}
            lines = "\n".join(
                f"• {p['name']} - ${p['price']} ({p.get('shortDescription') or ''})"
                for p in found.get("products") or []
            )
            return f"✨ Рекомендую для вас:\n\n{lines}\n\nХотите добавить что-то в корзину?"

        return GREETING


# ---------------------------------------------------------------- openai

SYSTEM_PROMPT = """Ты - ИИ-ассистент интернет-магазина продуктов питания BigShop.

ВАЖНО: Когда пользователь просит ДОБАВИТЬ товар в корзину, ты ОБЯЗАТЕЛЬНО должен:
1. Сначала найти товар через search_products
2. Затем добавить его в корзину через add_to_cart используя productId из результата поиска

ТВОЯ РОЛЬ:
- Помогай пользователям найти нужные продукты
- ОБЯЗАТЕЛЬНО добавляй товары в корзину когда пользователь просит
- Отвечай на вопросы о составе, пользе продуктов
- Рекомендуй товары и помогай с выбором
- Будь дружелюбным и полезным

ПРАВИЛА ИСПОЛЬЗОВАНИЯ ФУНКЦИЙ:
- "Найди молочные продукты" → search_products
- "Добавь бананы в корзину" → search_and_add_to_cart с productName: "бананы"
- "Что у меня в корзине?" → get_cart_info
- "Добавь 2 литра молока" → search_and_add_to_cart с productName: "молоко", quantity: 2

ВСЕГДА отвечай на русском языке с эмодзи."""

FOLLOW_UP_PROMPT = """Ты - ИИ-ассистент BigShop. Проанализируй результаты выполненных функций и дай полезный ответ пользователю.

Если товар был найден И добавлен в корзину - радостно сообщи об этом!
Если товар найден но НЕ добавлен - предложи добавить.
Если ничего не найдено - предложи альтернативы."""

TOOLS = [
    {
        "type": "function",
        "function": {
            "name": "search_products",
            "description": "Поиск продуктов в каталоге по категории, названию или цене",
            "parameters": {
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "Поисковый запрос по названию продукта"},
                    "category": {
                        "type": "string",
                        "description": "Категория продуктов (фрукты, молочные, мясо, хлеб)",
                    },
                    "maxPrice": {"type": "number", "description": "Максимальная цена в долларах"},
                    "minPrice": {"type": "number", "description": "Минимальная цена в долларах"},
                },
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "search_and_add_to_cart",
            "description": "Найти товар по названию и автоматически добавить в корзину",
            "parameters": {
                "type": "object",
                "properties": {
                    "productName": {
                        "type": "string",
                        "description": "Название товара для поиска и добавления (например: 'бананы', 'молоко', 'хлеб')",
                    },
                    "quantity": {
                        "type": "number",
                        "description": "Количество товара для добавления",
                        "minimum": 1,
                        "maximum": 10,
                        "default": 1,
                    },
                },
                "required": ["productName"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "add_to_cart",
            "description": "Добавить товар в корзину по его id из результатов поиска",
            "parameters": {
                "type": "object",
                "properties": {
                    "productId": {"type": "string", "description": "id товара"},
                    "quantity": {"type": "number", "description": "Количество", "minimum": 1, "default": 1},
                },
                "required": ["productId"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "get_cart_info",
            "description": "Получить текущее содержимое корзины пользователя",
            "parameters": {"type": "object", "properties": {}},
        },
    },
]


class OpenAIIntentResolver(IntentResolver):
    """
    Two passes over chat completions: the first one picks tools,
    the second one turns the tool results into the final reply.
    """

    def __init__(self, api_key: str | None = None, model: str = OPENAI_MODEL, client=None):
        if client is None:
            if not api_key:
                raise AssistantUnavailableError("AI assistant temporarily unavailable")
            client = OpenAI(api_key=api_key, timeout=OPENAI_TIMEOUT, max_retries=0)

        self.client = client
        self.model = model
        self.usage = None
        self._draft = ""

    def _complete(self, **kwargs):
        try:
            return self.client.chat.completions.create(model=self.model, temperature=0.7, **kwargs)
        except (openai.AuthenticationError, openai.APIConnectionError) as e:
            logger.error(f"OpenAI unavailable: {e}")
            raise AssistantUnavailableError("AI assistant temporarily unavailable") from e

    def resolve_intent(self, message: str) -> List[Operation]:
        completion = self._complete(
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": message},
            ],
            tools=TOOLS,
            tool_choice="auto",
            max_tokens=1000,
        )
        if not completion.choices:
            raise RuntimeError("No response from AI")

        # the reported model/usage are the ones of the tool-picking pass
        self.model = getattr(completion, "model", None) or self.model
        usage = getattr(completion, "usage", None)
        self.usage = usage.model_dump() if hasattr(usage, "model_dump") else usage

        choice = completion.choices[0].message
        self._draft = choice.content or ""

        operations = []
        for call in choice.tool_calls or []:
            try:
                args = json.loads(call.function.arguments or "{}")
            except json.JSONDecodeError:
                logger.warning(f"Unparseable arguments for {call.function.name}: {call.function.arguments!r}")
                args = {}
            logger.info(f"AI calling function: {call.function.name} {args}")
            operations.append(Operation(call.function.name, args))
        return operations

    def follow_up(self, message: str, results: List[Dict[str, Any]]) -> List[Operation]:
        # the user asked to add, a search found something, but nothing got added
        if "добав" not in message.lower():
            return []
        if any(r["function"] in ("add_to_cart", "search_and_add_to_cart") for r in results):
            return []

        found = _first_result(results, "search_products") or {}
        products = found.get("products") or []
        if not products:
            return []
        return [Operation("add_to_cart", {"productId": products[0]["id"], "quantity": 1})]

    def compose_reply(self, message: str, results: List[Dict[str, Any]]) -> str:
        if not results:
            return self._draft

        completion = self._complete(
            messages=[
                {"role": "system", "content": FOLLOW_UP_PROMPT},
                {
                    "role": "user",
                    "content": (
                        f'Изначальный запрос: "{message}"\n\n'
                        f"Результаты выполнения функций: {json.dumps(results, ensure_ascii=False, indent=2)}"
                    ),
                },
            ],
            max_tokens=800,
        )
        if completion.choices and completion.choices[0].message.content:
            return completion.choices[0].message.content
        return self._draft


def build_intent_resolver() -> IntentResolver:
    if ASSISTANT_MODE == "keyword":
        return KeywordIntentResolver()
    return OpenAIIntentResolver(api_key=OPENAI_API_KEY)
