# Narrative text shown beside each chart

NARRATIVE = {
    "overview": {
        "title": "Standard and Poor's 500",
        "content": r"""
The S&P 500 Index tracks the largest public companies in the United States,
weighted by market capitalization. It is maintained by S&P Dow Jones Indices,
a subsidiary of S&P Global.

Because it spans 500 large-cap companies across the whole economy, the index is
one of the most common yardsticks for U.S. equities and for the stock market as
a whole.

The pages in the sidebar walk through the index in three steps:

* **History**: the index level since 1980, with the major market events marked.
* **Companies**: every constituent sized by its index weight and colored by its
  year-to-date price return.
* **Growth**: what a single investment made in 2009 would have grown to.
        """
    },

    "history": {
        "title": "S&P 500 Index Historical Chart",
        "content": r"""
The chart shows the level of the S&P 500 Index from 1980 onwards. Only
free-floating shares (shares available to the public) count toward a company's
market cap. The index level is the sum of the constituents' market caps divided
by a divisor that S&P does not publish.

Despite sharp drawdowns around the dotcom bust, the financial crisis and the
pandemic, the long-run trend is clearly upward.

Move the pointer across the chart to read the index level on any month.
        """
    },

    "companies": {
        "title": "S&P 500 Index Companies by Market Cap Weight",
        "content": r"""
The index uses a market-cap weighting: each company's market cap (share price
times shares outstanding) divided by the total market cap of all constituents.

In the treemap each block's area is the company's index weight and its color is
the company's year-to-date price return, from red (losses) through white to
green (gains). Companies with larger weights move the index more than smaller
ones, which is also the main limitation of a cap-weighted index: when a few
heavily weighted stocks become overvalued, the whole index inflates with them.

Hover over a block to see the company's weight and year-to-date return.
        """
    },

    "growth": {
        "title": "S&P 500 Historical Returns",
        "content": r"""
The index itself cannot be bought, but many index funds track it by holding its
constituents at their index weights (the Vanguard 500 Index Fund is one
example).

The chart compounds the index's yearly returns since 2009 to estimate what an
initial investment would be worth today. Change the amount to recompute the
curve; hover over the line to read the value at the start of each year.
        """
    },
}

SOURCES = [
    ("S&P 500 index history (datahub.io)", "https://datahub.io/core/s-and-p-500#source-data-construction"),
    ("S&P 500 companies by weight (slickcharts)", "https://www.slickcharts.com/sp500"),
    ("S&P 500 yearly returns (slickcharts)", "https://www.slickcharts.com/sp500/returns"),
]
