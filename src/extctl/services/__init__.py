"""Service layer — operations the CLI runs against an ExtensionManager."""
