# qa_engine/core/base_tool.py

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type, Union
from pydantic import ValidationError
import time

from ..schemas.core import ToolInput, ToolOutput
from ..common.logger import LoggerFactory, LoggerType, LogLevel


class BaseTool(ABC):
    """Base class for all engine tools."""

    def __init__(
        self,
        name: str,
        description: str,
        input_schema: Type[ToolInput] = ToolInput,
        output_schema: Type[ToolOutput] = ToolOutput,
        config: Optional[Dict[str, Any]] = None,
        verbose: bool = False,
    ):
        """Initialize the tool.

        Args:
            name: Tool name
            description: Tool description
            input_schema: Pydantic model for validating inputs
            output_schema: Pydantic model for validating outputs
            config: Configuration parameters
            verbose: Whether to log detailed information
        """
        self.name = name
        self.description = description
        self.input_schema = input_schema
        self.output_schema = output_schema
        self.config = config or {}
        self.verbose = verbose

        log_level = LogLevel.DEBUG if verbose else LogLevel.INFO
        self.logger = LoggerFactory.get_logger(
            name=f"tool.{name}", logger_type=LoggerType.STANDARD, level=log_level
        )

    @abstractmethod
    async def _execute(self, input_data: ToolInput) -> Any:
        """Execute the tool's core logic.

        Args:
            input_data: Validated input data

        Returns:
            Raw output data
        """
        pass

    async def execute(self, input_data: Union[Dict[str, Any], ToolInput]) -> ToolOutput:
        """Execute the tool with validation and error handling.

        Args:
            input_data: The input data for the tool

        Returns:
            The tool's output
        """
        start_time = time.time()

        try:
            if isinstance(input_data, dict):
                validated_input = self.input_schema(**input_data)
            else:
                validated_input = input_data

            self.logger.debug(f"Input: {validated_input}")

            raw_output = await self._execute(validated_input)

            if isinstance(raw_output, dict):
                output = self.output_schema(**raw_output)
            elif isinstance(raw_output, self.output_schema):
                output = raw_output
            else:
                raise TypeError(
                    f"{self.name} returned {type(raw_output).__name__}, "
                    f"expected {self.output_schema.__name__}"
                )

            if output.execution_time is None:
                output.execution_time = time.time() - start_time
            self.logger.debug(
                f"Tool {self.name} completed in {output.execution_time:.2f}s"
            )

            return output

        except ValidationError as e:
            self.logger.error(f"Validation error: {e}")
            raise
        except Exception as e:
            self.logger.error(f"Error during tool execution: {e}")
            raise
