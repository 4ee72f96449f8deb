from .mode_plotting import plot_harmonic_mesh, plot_mode, plot_mode_grid

__all__ = ["plot_harmonic_mesh", "plot_mode", "plot_mode_grid"]
