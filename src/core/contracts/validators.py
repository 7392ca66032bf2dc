"""
JSON Schema Contract Validators

Модуль для валидации JSON данных согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы:
- draft_action.json (запись ledger)
- session_snapshot.json (наблюдаемое состояние сессии)
- draft_config.json (конфигурация сессии: бюджет, дедлайн, квоты)
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Автоматически находит схемы в contracts/schema/ относительно корня проекта.
    """

    def __init__(self, schema_dir: Path | None = None):
        # Корень проекта: 4 уровня вверх от этого файла
        self._schema_dir = schema_dir or (
            Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        )
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'draft_action')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation самой схемы
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации (ValidationError)."""
        return self.validator.iter_errors(data)


class DraftActionValidator(ContractValidator):
    """Валидатор для draft_action контракта."""

    def __init__(self):
        super().__init__("draft_action")


class SessionSnapshotValidator(ContractValidator):
    """Валидатор для session_snapshot контракта."""

    def __init__(self):
        super().__init__("session_snapshot")


class DraftConfigValidator(ContractValidator):
    """Валидатор для draft_config контракта."""

    def __init__(self):
        super().__init__("draft_config")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_draft_action(data: Dict[str, Any]) -> None:
    """
    Валидация записи ledger.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    DraftActionValidator().validate(data)


def validate_session_snapshot(data: Dict[str, Any]) -> None:
    """
    Валидация снапшота сессии.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    SessionSnapshotValidator().validate(data)


def validate_draft_config(data: Dict[str, Any]) -> None:
    """
    Валидация документа конфигурации.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    DraftConfigValidator().validate(data)


