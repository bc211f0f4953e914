# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

# Custom FilterSet exception classes should follow the following schema
#   1. All classes should inherit from an existing Built-In Exception class: https://docs.python.org/3/library/exceptions.html
#   2. All classes should have a custom error message with the goal of informing the FilterSet user specifically
#   3. All classes should propogate the inherited __init__ function otherwise via 'super().__init__(message)'


class FilterSetError(Exception):
    """base class for every error raised by filterset"""


class ConfigError(ValueError, FilterSetError):
    """raised when a filter set configuration fails validation"""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        message = "Invalid filter set configuration: " + "; ".join(problems)
        super().__init__(message)


class UnknownFieldError(KeyError, FilterSetError):
    """raised when a schema-bound filter set is given a field its schema does not declare"""

    def __init__(self, field: str, known_fields: list[str]) -> None:
        self.field = field
        message = f"Field '{field}' is not declared by the schema. Known fields are: {', '.join(known_fields)}"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0])


class UnknownOperatorError(ValueError, FilterSetError):
    """raised when an operator is not part of the filter set configuration"""

    def __init__(self, op: str, operators: tuple[str, ...]) -> None:
        self.op = op
        message = f"Operator '{op}' is not configured. Configured operators are: {', '.join(operators)}"
        super().__init__(message)


class FieldValueError(TypeError, FilterSetError):
    """raised when a value does not match the type the schema declares for its field"""

    def __init__(self, field: str, value: object, detail: str) -> None:
        self.field = field
        self.value = value
        message = f"Value {value!r} is not valid for field '{field}': {detail}"
        super().__init__(message)


class PayloadError(ValueError, FilterSetError):
    """raised when plain data does not have the field -> operator -> values shape of a payload"""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        message = "Invalid filter set payload: " + "; ".join(problems)
        super().__init__(message)
