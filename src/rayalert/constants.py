from __future__ import annotations

# Raydium program ids
CPMM_PROGRAM_ID   = "CPMMoo8L3F4NbTegBCKVNunggL7H1ZpdTHKxQB5qKP1C"
CLMM_PROGRAM_ID   = "CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK"
AMM_V4_PROGRAM_ID = "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8"

# SPL token programs whose transfers are inspected in nested traces
SPL_TOKEN_PROGRAM_ID      = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
SPL_TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
TOKEN_PROGRAM_IDS = frozenset({SPL_TOKEN_PROGRAM_ID, SPL_TOKEN_2022_PROGRAM_ID})

# SPL token instruction discriminators
TRANSFER_DISCRIMINATOR         = 3
TRANSFER_CHECKED_DISCRIMINATOR = 12

# Well-known base mints (displayed first in text output)
WSOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDT_MINT = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"
BASE_MINTS = frozenset({WSOL_MINT, USDC_MINT, USDT_MINT})

EXPLORER_TX_URL = "https://solscan.io/tx/"

WEBHOOK_QUEUE_CAPACITY = 1_000
