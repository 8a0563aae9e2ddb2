"""
Custom exceptions for ack-api-extractor with helpful error messages.
"""


class ExtractorError(Exception):
    """Base exception for ack-api-extractor errors."""

    def __init__(self, message: str, suggestion: str = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.message)

    def __str__(self):
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class ModelError(ExtractorError):
    """Errors related to loading a service API model."""

    pass


class ModelNotFoundError(ModelError):
    """No API model file could be located for a service."""

    def __init__(self, service_name: str, details: str = None):
        message = f"No API model found for service '{service_name}'"
        if details:
            message = f"{message}: {details}"

        suggestion = (
            "Check that the models checkout is next to this tool:\n"
            "  ls ../api-models-aws/models/<service>/service\n\n"
            "Or point at it explicitly:\n"
            "  ack-api-extractor extract --models-root <dir> ..."
        )
        super().__init__(message, suggestion)


class ModelParseError(ModelError):
    """API model file exists but is not a usable shape mapping."""

    def __init__(self, file_path: str, error_details: str):
        message = f"Failed to parse API model {file_path}: {error_details}"
        super().__init__(message)


class ControllerConfigError(ExtractorError):
    """Errors reading a controller's generator configuration."""

    pass


class ConfigNotFoundError(ControllerConfigError):
    """Controller, generator.yaml, or its model_name field is missing."""

    def __init__(self, service_name: str, details: str):
        message = f"Controller configuration not found for service '{service_name}': {details}"
        super().__init__(message)


class ConfigParseError(ControllerConfigError):
    """generator.yaml could not be parsed."""

    def __init__(self, file_path: str, error_details: str):
        message = f"Failed to parse controller configuration {file_path}: {error_details}"
        super().__init__(message)


class NoOperationsFoundError(ExtractorError):
    """The service model yielded no operations."""

    def __init__(self, service_name: str):
        message = f"No operations found for service '{service_name}'"
        suggestion = (
            "The model file was found but has no service shape with operations\n"
            "and no operation shapes. Check that the correct model was picked up."
        )
        super().__init__(message, suggestion)


class ClassificationError(ExtractorError):
    """Errors during control plane / data plane classification."""

    pass


class ClassificationInvokeError(ClassificationError):
    """The classification oracle could not be called."""

    def __init__(self, batch_number: int, error_details: str):
        message = f"Failed to invoke classifier for batch {batch_number}: {error_details}"
        suggestion = (
            "Check the LLM provider configuration and credentials.\n"
            "Or use the mock provider for offline runs:\n"
            "  llm:\n"
            "    provider: mock"
        )
        super().__init__(message, suggestion)


class ClassificationParseError(ClassificationError):
    """The classification oracle's reply could not be parsed."""

    def __init__(self, error_details: str, response: str = None):
        message = f"Failed to parse classification response: {error_details}"
        if response is not None:
            message += f"\nResponse: {response}"
        super().__init__(message)


class PolicyError(ExtractorError):
    """Errors during IAM policy generation."""

    pass


class NoSupportedOperationsError(PolicyError):
    """There are no implemented operations to grant."""

    def __init__(self, service_name: str):
        message = f"No supported operations found for service '{service_name}'"
        super().__init__(message)


class PolicyValidationError(PolicyError):
    """Generated policy failed validation."""

    def __init__(self, errors: list[str]):
        error_list = "\n  - ".join(errors)
        message = f"Policy validation failed with {len(errors)} error(s):\n  - {error_list}"
        super().__init__(message)


class LLMError(ExtractorError):
    """Errors related to LLM provider operations."""

    pass


class LLMProviderNotAvailableError(LLMError):
    """LLM provider not available (missing API key, etc.)."""

    def __init__(self, provider_name: str, api_key_env: str = None):
        message = f"LLM provider '{provider_name}' is not available."

        if api_key_env:
            suggestion = (
                f"Set the API key environment variable:\n"
                f"  export {api_key_env}=<your-api-key>\n\n"
                f"Or use mock provider for testing:\n"
                f"  Edit ack-api-extractor.yaml and set:\n"
                f"    llm:\n"
                f"      provider: mock"
            )
        else:
            suggestion = (
                "Check your ack-api-extractor.yaml configuration and AWS credentials.\n"
                "Ensure the provider is correctly configured."
            )
        super().__init__(message, suggestion)


class LLMAPIError(LLMError):
    """LLM API call failed."""

    def __init__(self, provider_name: str, error_message: str, retry_count: int = 0):
        message = f"{provider_name} API call failed: {error_message}"

        if retry_count > 0:
            message += f" (after {retry_count} retries)"

        suggestion = (
            "This could be due to:\n"
            "  - Network connectivity issues\n"
            "  - API rate limiting\n"
            "  - Invalid credentials\n"
            "  - Service outage\n\n"
            "Try:\n"
            "  1. Check your credentials and region\n"
            "  2. Wait a few minutes and retry\n"
            "  3. Run without --classify"
        )
        super().__init__(message, suggestion)


class ConfigurationError(ExtractorError):
    """Tool configuration file errors."""

    pass


class ConfigFileNotFoundError(ConfigurationError):
    """An explicitly requested configuration file does not exist."""

    def __init__(self, file_path: str):
        message = f"Configuration file not found: {file_path}"
        suggestion = (
            "Check the --config path, or create a default configuration with:\n"
            "  ack-api-extractor init <dir>"
        )
        super().__init__(message, suggestion)


class InvalidConfigError(ConfigurationError):
    """Configuration file is invalid."""

    def __init__(self, error_details: str):
        message = f"Invalid configuration file: {error_details}"

        suggestion = (
            "Fix the ack-api-extractor.yaml file.\n"
            "You can regenerate the default configuration:\n"
            "  mv ack-api-extractor.yaml ack-api-extractor.yaml.backup\n"
            "  ack-api-extractor init .\n\n"
            "Then merge your settings back from the backup."
        )
        super().__init__(message, suggestion)


class RetryableError(ExtractorError):
    """Error that should be retried."""

    def __init__(self, original_error: Exception, attempt: int, max_attempts: int):
        self.original_error = original_error
        self.attempt = attempt
        self.max_attempts = max_attempts

        message = f"Operation failed (attempt {attempt}/{max_attempts}): " f"{str(original_error)}"
        super().__init__(message)


def format_error_for_cli(error: Exception) -> str:
    """
    Format an exception for CLI display with helpful information.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, ExtractorError):
        output = f"[red]Error:[/red] {error.message}"
        if error.suggestion:
            output += f"\n\n[yellow]{error.suggestion}[/yellow]"
        return output
    else:
        return f"[red]Error:[/red] {str(error)}"
