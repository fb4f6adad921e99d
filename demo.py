import marimo

__generated_with = "0.17.6"
app = marimo.App(width="full")


@app.cell
def _():
    import marimo as mo
    import logging
    import sys
    from pathlib import Path

    # Setup path para imports
    project_root = Path(__file__).resolve().parent
    sys.path.insert(0, str(project_root))

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    from msseg.meanshift import MeanShiftConfig, process_images_batch
    from msseg.color import lab_features_to_rgb
    from msseg.data_loader import ImageLoader
    from msseg.viz import plot_image_grid, plot_meanshift_results, plot_convergence_summary
    return (
        ImageLoader,
        MeanShiftConfig,
        lab_features_to_rgb,
        mo,
        plot_convergence_summary,
        plot_image_grid,
        plot_meanshift_results,
        process_images_batch,
        project_root,
    )


@app.cell
def _(mo):
    mo.md("""
    # Segmentación de Imágenes a Color con Mean Shift

    Cada píxel se representa como un punto 5D (x, y, L, a, b) y se desplaza
    iterativamente hacia la media de sus vecinos que están a la vez dentro del
    **radio espacial** `hs` y del **radio de color** `hr`, hasta converger a un
    modo local de densidad. El resultado es una imagen con regiones aplanadas.

    Las imágenes se redimensionan a 256x256 antes del filtrado.
    """)
    return


@app.cell
def _(ImageLoader, plot_image_grid, project_root):
    loader = ImageLoader(data_dir=project_root / 'data')
    names = [n for n in loader.get_available_images() if not n.endswith('_meanshift')]
    images = loader.load_all_images(names)

    fig_grid = plot_image_grid(list(images.values()), list(images.keys()))
    fig_grid
    return images, loader


@app.cell
def _(mo):
    mo.md("""
    ## Aplicación de Mean Shift

    Los parámetros de cada imagen se leen de `params_{nombre}.json` si existe;
    en otro caso se usan los valores por defecto (`hs=8`, `hr=16`, `max_iter=5`,
    tolerancias de 0.3). La lectura de vecinos se hace siempre sobre la imagen
    original, por lo que el resultado no depende del orden de los píxeles.
    """)
    return


@app.cell
def _(images, loader, plot_meanshift_results, process_images_batch):
    configs = {name: loader.load_config(name) for name in images}

    results = process_images_batch(images, configs=configs)

    fig_results = plot_meanshift_results(images, results)
    fig_results
    return (results,)


@app.cell
def _(mo, results):
    table = "| Imagen | Convergidos | Agotados | Tiempo (ms) |\n|---|---|---|---|\n"
    table += "\n".join(
        f"| {name} | {r.n_converged} | {r.n_exhausted} | {r.elapsed_ms:.0f} |"
        for name, r in results.items()
    )
    mo.md("## Tiempos de Ejecución\n\n" + table)
    return


@app.cell
def _(plot_convergence_summary, results):
    first_name = next(iter(results))
    fig_summary = plot_convergence_summary(results[first_name])
    fig_summary
    return


@app.cell
def _(lab_features_to_rgb, loader, results):
    # Guardar imágenes segmentadas junto a las originales
    saved = [
        loader.save_image(f"{name}_meanshift", lab_features_to_rgb(r.segmented))
        for name, r in results.items()
    ]
    saved
    return


if __name__ == "__main__":
    app.run()
