# src/circuitrag/external/topics.py
"""Technical topic detection and learning.

A query only qualifies for external search when it mentions a known
technical topic. The topic list is a fixed base list plus topics learned
from earlier queries and persisted in a TopicStore.
"""

from __future__ import annotations

import logging
import re

from circuitrag.stores import TopicStore

logger = logging.getLogger(__name__)

BASE_TOPICS: tuple[str, ...] = (
    # Components
    "componente", "circuito", "microcontrolador", "sensor", "placa", "arduino",
    "raspberry", "pic", "stm32", "esp8266", "esp32", "atmega", "avr", "arm",
    "pic16f", "pic18f",
    # Specifications
    "especificação", "datasheet", "pinagem", "pinout", "esquemático", "diagrama",
    "potência", "tensão", "corrente", "resistência", "volt", "ampere", "ohm",
    "watt", "frequência", "hertz",
    # Discrete parts
    "capacitor", "transistor", "diodo", "led", "indutor", "oscilador", "relé",
    "transformador", "resistor", "fusível", "cristal",
    # Repair
    "manutenção", "reparo", "solda", "erro", "falha", "diagnóstico",
    "troubleshooting", "multímetro", "osciloscópio",
    # Protocols
    "protocolo", "comunicação", "uart", "spi", "i2c", "rs232", "rs485", "can",
    "usb", "ethernet", "wifi", "bluetooth",
    # Software
    "firmware", "bootloader", "driver", "biblioteca", "library", "código",
    "programação", "debugger",
    # Modules and peripherals
    "iot", "módulo", "nodemcu", "display", "lcd", "oled", "tft", "servo", "motor",
    "stepper", "step-motor", "servo-motor", "brushless", "dc-motor", "shield",
    "hat", "expansão", "rtc", "relógio",
    # Wireless and IoT protocols
    "lorawan", "lora", "sigfox", "zigbee", "thread", "z-wave", "mqtt", "coap",
    "websocket", "bluetooth-le", "ble", "nfc", "rf", "infravermelho",
    # PCB design
    "pcb", "placa de circuito", "trilha", "via", "pad", "footprint", "máscara",
    "silkscreen", "serigrafia", "smd", "pth", "through-hole", "montagem", "dip",
    "soic", "qfp", "bga",
    # Bench equipment
    "analisador lógico", "analisador de espectro", "gerador de sinais",
    "fonte de alimentação", "estação de solda", "retrabalho",
)

LEARNING_STOPWORDS = frozenset(
    """
    o a os as um uma uns umas de do da dos das no na nos nas ao aos à às pelo
    pela pelos pelas em por para com sem sob sobre entre contra que porque como
    quando onde quem qual quais cujo cujos cuja cujas e ou mas porém contudo
    todavia entretanto então portanto logo assim se caso embora apesar ainda já
    nunca sempre também nem é são foi eram estar eu tu ele ela nós vós eles elas
    meu minha seu sua este esse aquele isso isto aquilo ter fazer ir vir pôr ver
    pode será preciso deveria gostaria quero está tem seria há
    """.split()
)

TECHNICAL_INDICATORS = (
    "ador", "sor", "metro", "scope", "grafo", "tech", "ônico", "ência", "lógico", "tron",
)

MODEL_NUMBER = re.compile(r"^[a-z]{1,4}\d{1,4}[a-z]?\d?$", re.IGNORECASE)
WORD_PUNCTUATION = re.compile(r"[.,!?;:(){}\[\]<>]")

MAX_LEARNED_PER_QUERY = 2
MIN_TOPIC_LENGTH = 4
MAX_TOPIC_LENGTH = 25


def _mentions(query: str, topic: str) -> bool:
    return topic in query or f"{topic}s" in query


def candidate_topics(query: str, found_topics: list[str]) -> list[str]:
    """Words and bigrams from a query that look like new technical terms.

    Candidates are sorted shortest first; ties keep query order.
    """
    words = [WORD_PUNCTUATION.sub("", w) for w in query.lower().split()]
    words = [w for w in words if len(w) > 3 and w not in LEARNING_STOPWORDS]

    candidates: list[str] = []
    for word in words:
        if any(word in topic or topic in word for topic in found_topics):
            continue
        if any(indicator in word for indicator in TECHNICAL_INDICATORS):
            candidates.append(word)
        elif MODEL_NUMBER.match(word):
            candidates.append(word)
        elif "-" in word and len(word) > 5:
            candidates.append(word)

    for first, second in zip(words, words[1:]):
        bigram = f"{first} {second}"
        if any(topic in bigram for topic in found_topics):
            continue
        candidates.append(bigram)

    candidates.sort(key=len)
    return candidates


class TopicCache:
    """Base topics plus learned ones, loaded lazily from a TopicStore.

    The learned list is read from the store once, on first use, and is only
    appended to afterwards. Single-threaded use (one event loop) is assumed.

    Example:
        cache = TopicCache(SQLiteTopicStore("topics.db"))
        cache.should_use_external_search("Qual a tensão do capacitor C12?")  # True
    """

    def __init__(
        self,
        store: TopicStore | None = None,
        base_topics: tuple[str, ...] = BASE_TOPICS,
    ) -> None:
        self.store = store
        self.base_topics = base_topics
        self._additional: list[str] | None = None

    @property
    def additional_topics(self) -> list[str]:
        if self._additional is None:
            loaded = self._load()
            if loaded is None:
                return []
            self._additional = loaded
        return self._additional

    def _load(self) -> list[str] | None:
        if self.store is None:
            return []
        try:
            stored = self.store.get_additional_topics()
        except Exception as e:
            # Not cached, so the next call tries the store again
            logger.error("Could not load additional technical topics: %s", e)
            return None
        loaded: list[str] = []
        for topic in stored:
            normalized = (topic or "").strip().lower()
            if normalized and normalized not in self.base_topics and normalized not in loaded:
                loaded.append(normalized)
        return loaded

    def topics(self) -> list[str]:
        """Every known topic: base list first, then learned ones."""
        return [*self.base_topics, *self.additional_topics]

    def add_topic(self, topic: str) -> bool:
        """Learn a topic. Returns False if it is empty or already known."""
        normalized = (topic or "").strip().lower()
        if not normalized or normalized in self.topics():
            return False
        if self.store is not None:
            try:
                self.store.add_topic(normalized)
            except Exception as e:
                logger.error("Could not persist technical topic %r: %s", normalized, e)
                return False
        if self._additional is not None:
            self._additional.append(normalized)
        logger.info("Learned new technical topic: %r", normalized)
        return True

    def should_use_external_search(self, query: str) -> bool:
        """True when the query mentions any known topic (plural forms included)."""
        lowered = query.lower()
        return any(_mentions(lowered, topic) for topic in self.topics())

    def topics_in_query(self, query: str) -> list[str]:
        """Topics mentioned by the query.

        Each match is counted in the store, and the query is mined for new
        topics when at least one known topic was found.
        """
        lowered = query.lower()
        found = [topic for topic in self.topics() if _mentions(lowered, topic)]
        if not found:
            return found

        if self.store is not None:
            for topic in found:
                try:
                    self.store.record_usage(topic)
                except Exception as e:
                    logger.warning("Could not record usage of topic %r: %s", topic, e)

        self.learn_new_topics(query, found)
        return found

    def learn_new_topics(self, query: str, found_topics: list[str]) -> list[str]:
        """Add up to two new topics suggested by the query. Returns those added."""
        if not found_topics:
            return []
        added = []
        for candidate in candidate_topics(query, found_topics)[:MAX_LEARNED_PER_QUERY]:
            if MIN_TOPIC_LENGTH <= len(candidate) <= MAX_TOPIC_LENGTH and self.add_topic(
                candidate
            ):
                added.append(candidate)
        return added
