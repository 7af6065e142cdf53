"""
Shared DeFi tools utilities for creating LangChain tools.
"""
import inspect
import logging
from typing import Any, Callable, List, Optional
from langchain_core.tools import StructuredTool
from tools.aave_tool import AaveActionArgs, AaveActionProvider, create_aave_tool
from utils.wallet_provider import EvmWalletProvider

logger = logging.getLogger(__name__)


def create_langchain_tool(func: Callable, name: Optional[str] = None, description: Optional[str] = None, args_schema: Optional[Any] = None) -> StructuredTool:
    """Create a LangChain tool from a regular Python function.

    Detects whether the function is sync or async and creates the matching tool.

    Args:
        func: The Python function to convert to a LangChain tool
        name: Optional name for the tool (defaults to function name)
        description: Optional description for the tool (defaults to function docstring)
        args_schema: Optional Pydantic model for input validation

    Returns:
        A LangChain StructuredTool
    """
    tool_name = name or func.__name__
    tool_description = description or (func.__doc__ or f"Tool for {tool_name}")

    if inspect.iscoroutinefunction(func):
        return StructuredTool.from_function(
            func=None,
            coroutine=func,
            name=tool_name,
            description=tool_description,
            args_schema=args_schema
        )

    return StructuredTool.from_function(
        func=func,
        coroutine=None,
        name=tool_name,
        description=tool_description,
        args_schema=args_schema
    )


def create_defi_langchain_tools(
    wallet: EvmWalletProvider,
    aave_provider: Optional[AaveActionProvider] = None
) -> List[StructuredTool]:
    """Create the DeFi LangChain tools available for a wallet.

    Tools whose provider does not support the wallet's network are skipped.

    Args:
        wallet: Wallet bound to every tool
        aave_provider: Optional AaveActionProvider override

    Returns:
        List of LangChain StructuredTool objects
    """
    tools = []

    aave_provider = aave_provider or AaveActionProvider()
    network = wallet.get_network()

    if aave_provider.supports_network(network):
        aave_config = create_aave_tool(wallet=wallet, provider=aave_provider)
        aave_func = aave_config["tool"]

        async def aave_supply(chain: str, amount: str, asset: str) -> str:
            return await aave_func(chain=chain, amount=amount, asset=asset, action="supply")

        async def aave_withdraw(chain: str, amount: str, asset: str) -> str:
            return await aave_func(chain=chain, amount=amount, asset=asset, action="withdraw")

        tools.append(create_langchain_tool(
            func=aave_supply,
            name="aave_supply",
            description="Supply an asset (ETH or USDC) to Aave V3 on Base mainnet to earn yield. The amount is a decimal string in whole units of the asset.",
            args_schema=AaveActionArgs
        ))

        tools.append(create_langchain_tool(
            func=aave_withdraw,
            name="aave_withdraw",
            description="Withdraw a previously supplied asset (ETH or USDC) from Aave V3 on Base mainnet. The amount is a decimal string in whole units of the asset.",
            args_schema=AaveActionArgs
        ))
    else:
        logger.warning(f"Aave tools unavailable on network {getattr(network, 'network_id', None)}")

    logger.info(f"Created {len(tools)} DeFi tools for wallet {wallet.get_address()}")
    return tools
