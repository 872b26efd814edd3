"""Speech Summary Agent: запись речи в браузере, транскрипт через STT, summary и перевод через LLM."""

__version__ = "0.1.0"
