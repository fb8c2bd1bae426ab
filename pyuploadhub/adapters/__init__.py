"""Front ends over the upload pipeline."""
