"""Cloud provider checks used by the acceptance harness."""
