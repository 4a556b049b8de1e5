from clj_native_image.cli import run

run()
