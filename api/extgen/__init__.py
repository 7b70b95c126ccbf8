"""ExtensionGen core: icon spec language, raster export, and sandboxed previews."""
