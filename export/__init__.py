from .svg import export_mode_svgs, generate_mode_svg

__all__ = ["export_mode_svgs", "generate_mode_svg"]
