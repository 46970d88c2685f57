"""Pure services over the domain: contract resolution and the registry."""
