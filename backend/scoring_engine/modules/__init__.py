# Scoring engine modules
