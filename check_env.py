from tonify.settings import Settings, client_settings
def mask(s):
    return (s[:4] + "..." + s[-4:]) if s else None
settings = Settings()
print("API key :", mask(settings.OPENAI_API_KEY))
print("BASE URL:", settings.OPENAI_BASE_URL)
print("MODEL   :", settings.OPENAI_MODEL)
print("RELAY   :", client_settings.RELAY_URL)
