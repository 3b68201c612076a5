"""Keyword extraction for the keyword branch of hybrid retrieval."""

import re

PORTUGUESE_STOPWORDS = frozenset(
    """
    a ao aos aquela aquelas aquele aqueles aquilo as até com como da das de dela
    delas dele deles depois do dos e ela elas ele eles em entre era eram éramos
    essa essas esse esses esta estas este estes eu foi fomos for foram fosse
    fossem fui há isso isto já lhe lhes mais mas me mesmo meu meus minha minhas
    muito na não nas nem no nos nós nossa nossas nosso nossos num numa o os ou
    para pela pelas pelo pelos por qual quando que quem são se seja sejam sem
    será seu seus sua suas também te tem tém temos tenho teu teus tu tua tuas um
    uma você vocês vos
    """.split()
)

ENGLISH_STOPWORDS = frozenset(
    """
    a about above after again against all am an and any are as at be because
    been before being below between both but by can could did do does doing down
    during each few for from further had has have having he her here hers him his
    how i if in into is it its itself just me more most my no nor not now of off
    on once only or other our ours out over own same she should so some such than
    that the their theirs them then there these they this those through to too
    under until up very was we were what when where which while who whom why will
    with would you your yours
    """.split()
)

STOPWORDS: dict[str, frozenset[str]] = {
    "pt": PORTUGUESE_STOPWORDS,
    "en": ENGLISH_STOPWORDS,
}

# Anything that is not a word character, whitespace or an accented Portuguese letter
_PUNCTUATION = re.compile(r"[^\wáàâãéèêíïóôõöúüçñ\s]")


def extract_keywords(query: str, language: str = "pt") -> list[str]:
    """Extract search keywords from a free-text query.

    Lowercases, strips punctuation, drops tokens of length <= 2 and stop
    words for the language, and removes duplicates keeping first occurrence.

    Example:
        >>> extract_keywords("Qual é a tensão do VS1?")
        ['tensão', 'vs1']
    """
    stopwords = STOPWORDS.get(language, PORTUGUESE_STOPWORDS)
    cleaned = _PUNCTUATION.sub("", query.lower())
    words = [w for w in cleaned.split() if len(w) > 2 and w not in stopwords]
    return list(dict.fromkeys(words))
