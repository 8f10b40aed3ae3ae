from food_proxy.main import run

run()
