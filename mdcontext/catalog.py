"""
The fixed capability table.

Adding a tool, prompt or resource is a data change here; nothing in the
dispatcher branches on capability names.
"""

from .aggregator import AggregationRecipe, Section
from .mcp.schema import MCPPrompt, MCPResource, MCPTool
from .registry import (
    Aggregate,
    CapabilityKind,
    CapabilityRegistry,
    ReadFile,
    StaticText,
)


# Document key -> file name under the guides directory
DOCUMENTS = {
    "flow": "get_payment_flow.md",
    "api_spec": "get_api_specification.md",
    "encryption_spec": "get_encryption_specification.md",
    "signature_guide": "get_signature_guide.md",
    "error_codes": "get_error_codes.md",
}

SECTION_TITLES = {
    "encryption_spec": "Encryption Specification (mandatory)",
    "api_spec": "API Specification",
    "error_codes": "Error Codes",
    "flow": "Payment Processing Flow",
    "signature_guide": "Signature Specification",
}

# Order in which the full payment context is presented
CONTEXT_ORDER = ("encryption_spec", "api_spec", "error_codes", "flow", "signature_guide")

CONTEXT_PREAMBLE = "Required context for implementing the payment API:\n\n"
CONTEXT_CLOSING = (
    "\nFollow the specifications above strictly and implement secure "
    "payment processing."
)

RESOURCE_SCHEME = "payment://docs/"
ALL_DOCUMENTS_URI = RESOURCE_SCHEME + "all"


def _context_sections():
    return tuple(Section(title=SECTION_TITLES[key], key=key) for key in CONTEXT_ORDER)


PAYMENT_CONTEXT_RECIPE = AggregationRecipe(
    sections=_context_sections(),
    header=CONTEXT_PREAMBLE,
)

PAYMENT_PROMPT_RECIPE = AggregationRecipe(
    sections=_context_sections(),
    header=CONTEXT_PREAMBLE,
    footer=CONTEXT_CLOSING,
)

ALL_DOCUMENTS_RECIPE = AggregationRecipe(
    sections=tuple(Section(title=SECTION_TITLES[key], key=key) for key in DOCUMENTS),
)

REVIEW_INSTRUCTIONS = """\
Review the payment integration code in this conversation against the payment API guides.

Check in particular that:
1. Card data is encrypted exactly as the encryption specification requires before it leaves the client.
2. Every request is signed as described in the signature specification, including the timestamp and nonce.
3. Each documented error code is handled, and retryable errors are retried with backoff.
4. The request sequence follows the documented payment flow, including the final status confirmation.

If the guides are not in context yet, call the get_payment_context tool first.
Report each deviation with the relevant section of the guide and a suggested fix."""


TOOLS = (
    (
        "get_payment_context",
        Aggregate(PAYMENT_CONTEXT_RECIPE),
        MCPTool(
            name="get_payment_context",
            description=(
                "Retrieve everything needed to implement payment API, payment "
                "processing and credit card payment integrations: encryption "
                "specification, API specification, error codes, payment flow "
                "and signature guide."
            ),
        ),
    ),
    (
        "read_markdown_file",
        ReadFile(argument="file_path", header="File contents:\n"),
        MCPTool(
            name="read_markdown_file",
            description="Read the given Markdown file",
            input_schema={
                "type": "object",
                "properties": {
                    "file_path": {
                        "type": "string",
                        "description": "Path of the file to read",
                    },
                },
                "required": ["file_path"],
            },
        ),
    ),
)


PROMPTS = (
    (
        "payment-api-context",
        Aggregate(PAYMENT_PROMPT_RECIPE),
        MCPPrompt(
            name="payment-api-context",
            description="All context required when implementing the payment API",
        ),
    ),
    (
        "payment-api-spec-context",
        Aggregate(AggregationRecipe.single("api_spec", header="Payment API specification:\n")),
        MCPPrompt(
            name="payment-api-spec-context",
            description="Details of the payment API specification",
        ),
    ),
    (
        "payment-encryption-context",
        Aggregate(AggregationRecipe.single("encryption_spec", header="Encryption specification:\n")),
        MCPPrompt(
            name="payment-encryption-context",
            description="Detailed specification for encrypting payment data",
        ),
    ),
    (
        "payment-error-codes-context",
        Aggregate(AggregationRecipe.single("error_codes", header="Error codes:\n")),
        MCPPrompt(
            name="payment-error-codes-context",
            description="Payment error codes and how to handle them",
        ),
    ),
    (
        "payment-signature-context",
        Aggregate(AggregationRecipe.single("signature_guide", header="Signature guide:\n")),
        MCPPrompt(
            name="payment-signature-context",
            description="Implementation guide for signing payment requests",
        ),
    ),
    (
        "payment-implementation-review",
        StaticText(REVIEW_INSTRUCTIONS),
        MCPPrompt(
            name="payment-implementation-review",
            description="Instructions for reviewing a payment integration against the guides",
        ),
    ),
)


def _document_resource(slug: str, key: str, name: str, description: str):
    uri = RESOURCE_SCHEME + slug
    return (
        uri,
        Aggregate(AggregationRecipe.single(key)),
        MCPResource(uri=uri, name=name, description=description),
    )


RESOURCES = (
    _document_resource("flow", "flow", "Payment Flow", "Step-by-step payment processing flow"),
    _document_resource("api-spec", "api_spec", "API Specification", "Payment API endpoints, requests and responses"),
    _document_resource("encryption", "encryption_spec", "Encryption Specification", "Mandatory card data encryption rules"),
    _document_resource("signature", "signature_guide", "Signature Guide", "How to sign payment requests"),
    _document_resource("error-codes", "error_codes", "Error Codes", "Payment error codes and recommended handling"),
    (
        ALL_DOCUMENTS_URI,
        Aggregate(ALL_DOCUMENTS_RECIPE),
        MCPResource(
            uri=ALL_DOCUMENTS_URI,
            name="All Payment Guides",
            description="Every payment guide combined into one document",
        ),
    ),
)


def build_registry() -> CapabilityRegistry:
    """Register the fixed table and return the sealed registry."""
    registry = CapabilityRegistry()
    for kind, table in (
        (CapabilityKind.TOOL, TOOLS),
        (CapabilityKind.PROMPT, PROMPTS),
        (CapabilityKind.RESOURCE, RESOURCES),
    ):
        for capability_id, action, descriptor in table:
            registry.register(kind, capability_id, action, descriptor)
    return registry.seal()
