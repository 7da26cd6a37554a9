# Swapr (Algebra) factory and pool, Gnosis chain
ALGEBRA_FACTORY_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "token0", "type": "address"},
            {"internalType": "address", "name": "token1", "type": "address"},
        ],
        "name": "poolByPair",
        "outputs": [{"internalType": "address", "name": "pool", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ALGEBRA_POOL_ABI = [
    {
        "inputs": [],
        "name": "token0",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "token1",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint32[]", "name": "secondsAgos", "type": "uint32[]"}],
        "name": "getTimepoints",
        "outputs": [
            {"internalType": "int56[]", "name": "tickCumulatives", "type": "int56[]"},
            {"internalType": "uint160[]", "name": "secondsPerLiquidityCumulatives", "type": "uint160[]"},
            {"internalType": "uint112[]", "name": "volatilityCumulatives", "type": "uint112[]"},
            {"internalType": "uint256[]", "name": "volumePerAvgLiquiditys", "type": "uint256[]"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "globalState",
        "outputs": [
            {"internalType": "uint160", "name": "price", "type": "uint160"},
            {"internalType": "int24", "name": "tick", "type": "int24"},
            {"internalType": "uint16", "name": "fee", "type": "uint16"},
            {"internalType": "uint16", "name": "timepointIndex", "type": "uint16"},
            {"internalType": "uint8", "name": "communityFeeToken0", "type": "uint8"},
            {"internalType": "uint8", "name": "communityFeeToken1", "type": "uint8"},
            {"internalType": "bool", "name": "unlocked", "type": "bool"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]
