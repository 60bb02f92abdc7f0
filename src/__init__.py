"""TON/RUB currency converter with a terminal price chart."""
